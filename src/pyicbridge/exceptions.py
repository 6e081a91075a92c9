"""Exceptions raised by pyicbridge."""

from __future__ import annotations

from typing import Any


class ICError(Exception):
    """Base class for all pyicbridge errors."""


class ICConnectionError(ICError):
    """Raised when the controller cannot be reached or the link is down."""


class ICAuthenticationError(ICConnectionError):
    """Raised when the controller rejects the supplied credentials."""


class ICResponseError(ICError):
    """Raised when the controller answers with a non-200 status."""

    def __init__(self, code: str) -> None:
        super().__init__(f"IntelliCenter returned error code {code}")
        self.code = code


class ICConfigError(ICError):
    """Raised for invalid bridge configuration."""


class FrameOverflowError(ICError):
    """Raised when the frame buffer grows past its limit without a terminator."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"frame buffer exceeded maximum size ({size} > {limit})")
        self.size = size
        self.limit = limit


class DecodeError(ICError):
    """Raised when a protocol line is not a valid message."""

    def __init__(self, line: str | bytes, reason: str) -> None:
        preview = line[:100] if isinstance(line, str) else line[:100].decode("utf-8", "replace")
        super().__init__(f"cannot decode message ({reason}): {preview}")
        self.line = line


class UnknownObjectError(ICError):
    """Raised when an object identifier is not in the registry."""

    def __init__(self, objnam: str) -> None:
        super().__init__(f"unknown object {objnam}")
        self.objnam = objnam


class RequiredFieldParseError(ICError):
    """Raised when a discovery node lacks a numeric field the model needs."""

    def __init__(self, objnam: str, key: str, value: Any) -> None:
        super().__init__(f"{objnam}: required field {key} is not numeric ({value!r})")
        self.objnam = objnam
        self.key = key
        self.value = value
