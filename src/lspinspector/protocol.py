"""Trace record model: message kinds, verbosity levels and payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Any

from lspinspector.timefmt import encode_iso8601


class MessageKind(IntEnum):
    """Direction and category of a traced protocol message."""

    SEND_NOTIFICATION = 1
    RECEIVE_NOTIFICATION = 2
    SEND_REQUEST = 3
    RECEIVE_REQUEST = 4
    SEND_RESPONSE = 5
    RECEIVE_RESPONSE = 6

    def __str__(self) -> str:
        return _KIND_NAMES[self]

    @classmethod
    def parse(cls, text: str) -> MessageKind:
        for kind, name in _KIND_NAMES.items():
            if name == text:
                return kind
        raise ValueError(f"Unknown message kind: {text!r}")


_KIND_NAMES: dict[MessageKind, str] = {
    MessageKind.SEND_NOTIFICATION: "send-notification",
    MessageKind.RECEIVE_NOTIFICATION: "recv-notification",
    MessageKind.SEND_REQUEST: "send-request",
    MessageKind.RECEIVE_REQUEST: "recv-request",
    MessageKind.SEND_RESPONSE: "send-response",
    MessageKind.RECEIVE_RESPONSE: "recv-response",
}


def kind_name(value: int) -> str:
    """Hyphenated name of a message kind, or its decimal value if unknown."""
    try:
        return _KIND_NAMES[MessageKind(value)]
    except ValueError:
        return str(int(value))


class LogFormat(IntEnum):
    """Rendering of an inspector log output."""

    TEXT = 1
    JSON = 2

    def __str__(self) -> str:
        return format_name(self)

    @classmethod
    def parse(cls, text: str) -> LogFormat:
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown log format: {text!r}") from None


def format_name(value: int) -> str:
    """Lowercase name of a log format, or its decimal value if unknown."""
    try:
        return LogFormat(value).name.lower()
    except ValueError:
        return str(int(value))


class TraceLevel(IntEnum):
    """LSP trace verbosity, ordered from quietest to loudest."""

    OFF = 0
    MESSAGES = 1
    VERBOSE = 2

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> TraceLevel:
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown trace level: {text!r}") from None


@dataclass(frozen=True, slots=True)
class RequestMetadata:
    """Correlation state for one outstanding request.

    Created when the request is queued and handed back to the tracer once
    its response (or async completion) arrives.
    """

    queuing_start_time: datetime


def _is_empty_body(body: Any) -> bool:
    if body is None:
        return True
    if isinstance(body, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(body) == 0
    return False


@dataclass(frozen=True, slots=True)
class TracePayload:
    """One traced protocol message.

    ``message`` is what the caller knows about the message (method, command
    or event name); the tracer replaces it with the rendered summary and
    stamps ``time`` before the record is emitted.
    """

    kind: MessageKind | int
    message: str = ""
    protocol_type: str = ""
    id: str = ""
    latency: timedelta | None = None
    body: Any = None
    success: bool = True
    error_message: str = ""
    time: datetime | None = None

    @property
    def has_body(self) -> bool:
        return not _is_empty_body(self.body)

    def to_fields(self) -> dict[str, Any]:
        """Ordered structured-log fields for this payload.

        ``id`` and ``latency_ms`` are omitted when unset, ``body`` when empty.
        """
        fields: dict[str, Any] = {
            "time": encode_iso8601(self.time) if self.time is not None else None,
            "message": self.message,
            "kind": kind_name(self.kind),
            "protocol_type": self.protocol_type,
        }
        if self.id:
            fields["id"] = self.id
        if self.latency is not None:
            fields["latency_ms"] = max(0, self.latency // timedelta(milliseconds=1))
        if self.has_body:
            fields["body"] = self.body
        return fields
