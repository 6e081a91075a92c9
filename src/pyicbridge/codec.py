"""Encoding and decoding of IntelliCenter messages.

Outbound requests are JSON objects of the form
``{command, messageID, queryName?, arguments?, objectList?}``; inbound
messages carry ``{command, response?, messageID, queryName?, answer?,
objectList?}``. Both travel one per line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson

from .attributes import (
    ANSWER_KEY,
    ARGUMENTS_KEY,
    CHANGES_KEY,
    COMMAND_KEY,
    CONDITION_KEY,
    DESCRIPTION_KEY,
    GET_HARDWARE_DEFINITION_QUERY,
    GET_PARAM_LIST_CMD,
    GET_QUERY_CMD,
    KEYS_KEY,
    MESSAGE_ID_KEY,
    MODE_ATTR,
    OBJECT_LIST_KEY,
    OBJNAM_KEY,
    OBJTYP_ATTR,
    PARAMS_KEY,
    QUERY_NAME_KEY,
    REQUEST_PARAM_LIST_CMD,
    RESPONSE_KEY,
    RESPONSE_OK,
    SET_PARAM_LIST_CMD,
    SYSTEM_OBJNAM,
    SYSTEM_TYPE,
)
from .exceptions import DecodeError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass
class ICRequest:
    """A request to send to the controller.

    The message ID is normally left empty and assigned by the protocol right
    before the request goes on the wire.
    """

    command: str
    message_id: str | None = None
    query_name: str | None = None
    arguments: str | None = None
    condition: str | None = None
    object_list: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation, omitting unset fields."""
        msg: dict[str, Any] = {COMMAND_KEY: self.command}
        if self.message_id is not None:
            msg[MESSAGE_ID_KEY] = self.message_id
        if self.query_name is not None:
            msg[QUERY_NAME_KEY] = self.query_name
        if self.arguments is not None:
            msg[ARGUMENTS_KEY] = self.arguments
        if self.condition is not None:
            msg[CONDITION_KEY] = self.condition
        if self.object_list is not None:
            msg[OBJECT_LIST_KEY] = self.object_list
        return msg


@dataclass
class ICResponse:
    """A response or notification received from the controller."""

    command: str
    message_id: str | None = None
    response: str | None = None
    query_name: str | None = None
    description: str | None = None
    answer: Any = None
    object_list: list[Any] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_response(self) -> bool:
        """Return True if this answers a request (as opposed to a push)."""
        return self.response is not None

    @property
    def ok(self) -> bool:
        """Return True unless the controller reported an error status."""
        return self.response is None or self.response == RESPONSE_OK


@dataclass(frozen=True)
class ObjectChange:
    """New parameter values for one object."""

    objnam: str
    params: dict[str, Any]


def encode_request(request: ICRequest) -> bytes:
    """Encode a request as a terminated wire line."""
    return orjson.dumps(request.to_dict()) + b"\r\n"


def decode_message(line: bytes | str) -> ICResponse:
    """Decode one wire line.

    Raises:
        DecodeError: If the line is not a JSON object with a command.
    """
    try:
        msg = orjson.loads(line)
    except orjson.JSONDecodeError as err:
        raise DecodeError(line, f"invalid JSON: {err}") from err

    if not isinstance(msg, dict):
        raise DecodeError(line, "not an object")

    command = msg.get(COMMAND_KEY)
    if not isinstance(command, str):
        raise DecodeError(line, "missing command")

    message_id = msg.get(MESSAGE_ID_KEY)
    object_list = msg.get(OBJECT_LIST_KEY)
    return ICResponse(
        command=command,
        message_id=str(message_id) if message_id is not None else None,
        response=msg.get(RESPONSE_KEY),
        query_name=msg.get(QUERY_NAME_KEY),
        description=msg.get(DESCRIPTION_KEY),
        answer=msg.get(ANSWER_KEY),
        object_list=object_list if isinstance(object_list, list) else None,
        raw=msg,
    )


def normalize_changes(object_list: Iterable[Any]) -> list[ObjectChange]:
    """Flatten an objectList into individual object changes.

    Entries come either as ``{objnam, params}`` or wrapped as
    ``{changes: [{objnam, params}, ...]}``. Entries without an identifier or
    parameters are skipped.
    """
    result: list[ObjectChange] = []
    for entry in object_list:
        if not isinstance(entry, dict):
            continue
        changes = entry.get(CHANGES_KEY)
        items = changes if isinstance(changes, list) else [entry]
        for item in items:
            if not isinstance(item, dict):
                continue
            objnam = item.get(OBJNAM_KEY)
            params = item.get(PARAMS_KEY)
            if objnam and isinstance(params, dict):
                result.append(ObjectChange(objnam, params))
    return result


# ---------------------------------------------------------------------------
# Request builders


def hardware_definition_request(category: str) -> ICRequest:
    """Build the discovery query for one object category."""
    return ICRequest(
        command=GET_QUERY_CMD,
        query_name=GET_HARDWARE_DEFINITION_QUERY,
        arguments=category,
    )


def subscribe_request(objnam: str, keys: Iterable[str]) -> ICRequest:
    """Build a request asking to be notified of changes to keys of objnam."""
    return ICRequest(
        command=REQUEST_PARAM_LIST_CMD,
        object_list=[{OBJNAM_KEY: objnam, KEYS_KEY: list(keys)}],
    )


def set_params_request(objnam: str, params: Mapping[str, Any]) -> ICRequest:
    """Build a request writing params on objnam."""
    return ICRequest(
        command=SET_PARAM_LIST_CMD,
        object_list=[{OBJNAM_KEY: objnam, PARAMS_KEY: dict(params)}],
    )


def keepalive_request() -> ICRequest:
    """Build the lightweight query used to keep the connection alive."""
    return ICRequest(
        command=GET_PARAM_LIST_CMD,
        condition=f"{OBJTYP_ATTR}={SYSTEM_TYPE}",
        object_list=[{OBJNAM_KEY: SYSTEM_OBJNAM, KEYS_KEY: [MODE_ATTR]}],
    )
