"""Wire-level constants of the IntelliCenter line protocol."""

# Envelope fields
COMMAND_KEY = "command"
MESSAGE_ID_KEY = "messageID"
RESPONSE_KEY = "response"
QUERY_NAME_KEY = "queryName"
ARGUMENTS_KEY = "arguments"
ANSWER_KEY = "answer"
OBJECT_LIST_KEY = "objectList"
CHANGES_KEY = "changes"
DESCRIPTION_KEY = "description"
CONDITION_KEY = "condition"

# Object tree fields
OBJNAM_KEY = "objnam"
PARAMS_KEY = "params"
KEYS_KEY = "keys"

# Request commands
GET_QUERY_CMD = "GetQuery"
REQUEST_PARAM_LIST_CMD = "RequestParamList"
SET_PARAM_LIST_CMD = "SetParamList"
GET_PARAM_LIST_CMD = "GetParamList"

REQUEST_COMMANDS = frozenset(
    [GET_QUERY_CMD, REQUEST_PARAM_LIST_CMD, SET_PARAM_LIST_CMD, GET_PARAM_LIST_CMD]
)

# Response / notification commands
SEND_QUERY_CMD = "SendQuery"
NOTIFY_LIST_CMD = "NotifyList"
WRITE_PARAM_LIST_CMD = "WriteParamList"
SEND_PARAM_LIST_CMD = "SendParamList"

# Commands whose objectList carries object changes
CHANGE_COMMANDS = frozenset([NOTIFY_LIST_CMD, WRITE_PARAM_LIST_CMD, SEND_PARAM_LIST_CMD])

GET_HARDWARE_DEFINITION_QUERY = "GetHardwareDefinition"

# Categories requested, in order, to assemble the full hardware definition
DISCOVER_CATEGORIES = (
    "CIRCUITS",
    "PUMPS",
    "CHEMS",
    "VALVES",
    "HEATERS",
    "SENSORS",
    "GROUPS",
)

RESPONSE_OK = "200"

# Object types
PANEL_TYPE = "PANEL"
MODULE_TYPE = "MODULE"
CIRCUIT_TYPE = "CIRCUIT"
BODY_TYPE = "BODY"
HEATER_TYPE = "HEATER"
PUMP_TYPE = "PUMP"
PMPCIRC_TYPE = "PMPCIRC"
SYSTEM_TYPE = "SYSTEM"

# Attribute codes
OBJTYP_ATTR = "OBJTYP"
SUBTYP_ATTR = "SUBTYP"
SNAME_ATTR = "SNAME"
OBJLIST_ATTR = "OBJLIST"
CIRCUITS_ATTR = "CIRCUITS"
FEATR_ATTR = "FEATR"
STATUS_ATTR = "STATUS"
ACT_ATTR = "ACT"
LSTTMP_ATTR = "LSTTMP"
HITMP_ATTR = "HITMP"
LOTMP_ATTR = "LOTMP"
HTSRC_ATTR = "HTSRC"
HEATER_ATTR = "HEATER"
MODE_ATTR = "MODE"
SPEED_ATTR = "SPEED"
SELECT_ATTR = "SELECT"
CIRCUIT_ATTR = "CIRCUIT"
BODY_ATTR = "BODY"
MIN_ATTR = "MIN"
MAX_ATTR = "MAX"
MINF_ATTR = "MINF"
MAXF_ATTR = "MAXF"

# Special values
STATUS_ON = "ON"
STATUS_OFF = "OFF"
PUMP_STATUS_ON = "10"
NULL_OBJNAM = "00000"
LEGACY_SUBTYPE = "LEGACY"

# 'SPEED' (variable speed) and 'VSF' (variable speed and flow)
VARIABLE_SPEED_PUMP_SUBTYPES = frozenset(["SPEED", "VSF"])

# Controller granularity for RPM settings
RPM_STEP = 50

DEFAULT_PORT = 6681

# Object queried by keepalives, always present
SYSTEM_OBJNAM = "INCR"

INTELLIBRITE_SUBTYPE = "INTELLI"

# Keys we subscribe to for each kind of exposed object
BODY_SUBSCRIBE_KEYS = (
    STATUS_ATTR,
    LSTTMP_ATTR,
    HTSRC_ATTR,
    HEATER_ATTR,
    MODE_ATTR,
    LOTMP_ATTR,
    HITMP_ATTR,
)
FEATURE_SUBSCRIBE_KEYS = (STATUS_ATTR, ACT_ATTR)
PUMP_CIRCUIT_SUBSCRIBE_KEYS = (STATUS_ATTR, SPEED_ATTR, SELECT_ATTR)
