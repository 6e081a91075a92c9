"""IntelliCenter protocol codes, object types and subscription keys."""

from .constants import (
    ACT_ATTR,
    ANSWER_KEY,
    ARGUMENTS_KEY,
    BODY_ATTR,
    BODY_SUBSCRIBE_KEYS,
    BODY_TYPE,
    CHANGES_KEY,
    CHANGE_COMMANDS,
    CIRCUITS_ATTR,
    CIRCUIT_ATTR,
    CIRCUIT_TYPE,
    COMMAND_KEY,
    CONDITION_KEY,
    DEFAULT_PORT,
    DESCRIPTION_KEY,
    DISCOVER_CATEGORIES,
    FEATR_ATTR,
    FEATURE_SUBSCRIBE_KEYS,
    GET_HARDWARE_DEFINITION_QUERY,
    GET_PARAM_LIST_CMD,
    GET_QUERY_CMD,
    HEATER_ATTR,
    HEATER_TYPE,
    HITMP_ATTR,
    HTSRC_ATTR,
    INTELLIBRITE_SUBTYPE,
    KEYS_KEY,
    LEGACY_SUBTYPE,
    LOTMP_ATTR,
    LSTTMP_ATTR,
    MAXF_ATTR,
    MAX_ATTR,
    MESSAGE_ID_KEY,
    MINF_ATTR,
    MIN_ATTR,
    MODE_ATTR,
    MODULE_TYPE,
    NOTIFY_LIST_CMD,
    NULL_OBJNAM,
    OBJECT_LIST_KEY,
    OBJLIST_ATTR,
    OBJNAM_KEY,
    OBJTYP_ATTR,
    PANEL_TYPE,
    PARAMS_KEY,
    PMPCIRC_TYPE,
    PUMP_CIRCUIT_SUBSCRIBE_KEYS,
    PUMP_STATUS_ON,
    PUMP_TYPE,
    QUERY_NAME_KEY,
    REQUEST_COMMANDS,
    REQUEST_PARAM_LIST_CMD,
    RESPONSE_KEY,
    RESPONSE_OK,
    RPM_STEP,
    SELECT_ATTR,
    SEND_PARAM_LIST_CMD,
    SEND_QUERY_CMD,
    SET_PARAM_LIST_CMD,
    SNAME_ATTR,
    SPEED_ATTR,
    STATUS_ATTR,
    STATUS_OFF,
    STATUS_ON,
    SUBTYP_ATTR,
    SYSTEM_OBJNAM,
    SYSTEM_TYPE,
    VARIABLE_SPEED_PUMP_SUBTYPES,
    WRITE_PARAM_LIST_CMD,
)

__all__ = [
    "ACT_ATTR",
    "ANSWER_KEY",
    "ARGUMENTS_KEY",
    "BODY_ATTR",
    "BODY_SUBSCRIBE_KEYS",
    "BODY_TYPE",
    "CHANGES_KEY",
    "CHANGE_COMMANDS",
    "CIRCUITS_ATTR",
    "CIRCUIT_ATTR",
    "CIRCUIT_TYPE",
    "COMMAND_KEY",
    "CONDITION_KEY",
    "DEFAULT_PORT",
    "DESCRIPTION_KEY",
    "DISCOVER_CATEGORIES",
    "FEATR_ATTR",
    "FEATURE_SUBSCRIBE_KEYS",
    "GET_HARDWARE_DEFINITION_QUERY",
    "GET_PARAM_LIST_CMD",
    "GET_QUERY_CMD",
    "HEATER_ATTR",
    "HEATER_TYPE",
    "HITMP_ATTR",
    "HTSRC_ATTR",
    "INTELLIBRITE_SUBTYPE",
    "KEYS_KEY",
    "LEGACY_SUBTYPE",
    "LOTMP_ATTR",
    "LSTTMP_ATTR",
    "MAXF_ATTR",
    "MAX_ATTR",
    "MESSAGE_ID_KEY",
    "MINF_ATTR",
    "MIN_ATTR",
    "MODE_ATTR",
    "MODULE_TYPE",
    "NOTIFY_LIST_CMD",
    "NULL_OBJNAM",
    "OBJECT_LIST_KEY",
    "OBJLIST_ATTR",
    "OBJNAM_KEY",
    "OBJTYP_ATTR",
    "PANEL_TYPE",
    "PARAMS_KEY",
    "PMPCIRC_TYPE",
    "PUMP_CIRCUIT_SUBSCRIBE_KEYS",
    "PUMP_STATUS_ON",
    "PUMP_TYPE",
    "QUERY_NAME_KEY",
    "REQUEST_COMMANDS",
    "REQUEST_PARAM_LIST_CMD",
    "RESPONSE_KEY",
    "RESPONSE_OK",
    "RPM_STEP",
    "SELECT_ATTR",
    "SEND_PARAM_LIST_CMD",
    "SEND_QUERY_CMD",
    "SET_PARAM_LIST_CMD",
    "SNAME_ATTR",
    "SPEED_ATTR",
    "STATUS_ATTR",
    "STATUS_OFF",
    "STATUS_ON",
    "SUBTYP_ATTR",
    "SYSTEM_OBJNAM",
    "SYSTEM_TYPE",
    "VARIABLE_SPEED_PUMP_SUBTYPES",
    "WRITE_PARAM_LIST_CMD",
]
