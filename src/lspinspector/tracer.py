"""LSP inspector tracer.

Turns protocol lifecycle events (requests sent, responses and async
completions received, server events) into structured log records. Whether a
record is produced, and whether it carries the message body, is decided by
the session's trace level.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol
from uuid import uuid4

from lspinspector.core.errors import SerializationError, SinkError
from lspinspector.core.logging import TRACE_LOGGER_NAME, build_trace_logger
from lspinspector.protocol import (
    MessageKind,
    RequestMetadata,
    TraceLevel,
    TracePayload,
    kind_name,
)
from lspinspector.timefmt import elapsed_ms, format_latency, utc_now

if TYPE_CHECKING:
    from lspinspector.config.models import InspectorConfig

ARGUMENTS_PREFIX = "Arguments:\n"
RESULT_PREFIX = "Result:\n"
DATA_PREFIX = "Data:\n"

TRACE_EVENT = "trace"
TRACE_SEVERITY = "info"


@dataclass(frozen=True, slots=True)
class TraceLevelPolicy:
    """Verbosity gate, fixed for the lifetime of a tracer."""

    level: TraceLevel = TraceLevel.OFF

    def __post_init__(self) -> None:
        # Accept raw integers such as an LSP trace value.
        object.__setattr__(self, "level", TraceLevel(self.level))

    def should_trace(self) -> bool:
        return self.level != TraceLevel.OFF

    def should_include_body(self) -> bool:
        return self.level == TraceLevel.VERBOSE


class TraceSink(Protocol):
    """Destination for trace records."""

    def emit(self, severity: str, fields: Mapping[str, Any]) -> None: ...


class StructlogSink:
    """Sink writing each record as one structlog event."""

    def __init__(self, logger: Any, event: str = TRACE_EVENT) -> None:
        self._logger = logger
        self._event = event

    def emit(self, severity: str, fields: Mapping[str, Any]) -> None:
        getattr(self._logger, severity.lower())(self._event, **fields)


class Tracer(ABC):
    """The four trace operations a protocol client calls."""

    @abstractmethod
    def trace_request(
        self,
        server_id: str,
        payload: TracePayload,
        response_expected: bool,
        queue_length: int,
    ) -> None: ...

    @abstractmethod
    def trace_response(
        self,
        server_id: str,
        payload: TracePayload,
        meta: RequestMetadata,
    ) -> None: ...

    @abstractmethod
    def trace_request_completed(
        self,
        server_id: str,
        command: str,
        request_seq: int,
        meta: RequestMetadata,
    ) -> None: ...

    @abstractmethod
    def trace_event(self, server_id: str, payload: TracePayload) -> None: ...


class NopTracer(Tracer):
    """Tracer that records nothing."""

    def trace_request(
        self,
        server_id: str,
        payload: TracePayload,
        response_expected: bool,
        queue_length: int,
    ) -> None:
        return None

    def trace_response(self, server_id: str, payload: TracePayload, meta: RequestMetadata) -> None:
        return None

    def trace_request_completed(
        self,
        server_id: str,
        command: str,
        request_seq: int,
        meta: RequestMetadata,
    ) -> None:
        return None

    def trace_event(self, server_id: str, payload: TracePayload) -> None:
        return None


def render_body(prefix: str, body: Any) -> str:
    """Render ``body`` as 4-space indented JSON behind ``prefix``.

    Raises:
        SerializationError: If the body holds values JSON cannot represent.
    """
    try:
        text = json.dumps(body, indent=4, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError.unencodable(prefix.rstrip(":\n").lower(), str(e)) from e
    return prefix + text


class InspectorTracer(Tracer):
    """Production tracer: summary line plus optional body, one record per call.

    Errors from serialization or from the sink propagate to the caller, which
    is expected to log them and carry on with the protocol operation.
    """

    def __init__(
        self,
        policy: TraceLevelPolicy,
        sink: TraceSink,
        clock: Callable[[], datetime] = utc_now,
        logger: Any = None,
    ) -> None:
        self._policy = policy
        self._sink = sink
        self._clock = clock
        # Session logger for diagnostics; None keeps the tracer silent.
        self._log = logger

    @property
    def policy(self) -> TraceLevelPolicy:
        return self._policy

    def _body(self, prefix: str, payload: TracePayload) -> str | None:
        if not self._policy.should_include_body() or not payload.has_body:
            return None
        try:
            return render_body(prefix, payload.body)
        except SerializationError as e:
            if self._log is not None:
                self._log.debug("trace_body_unencodable", **e.details)
            raise

    def _emit(
        self,
        server_id: str,
        payload: TracePayload,
        summary: str,
        body: str | None,
        now: datetime,
    ) -> None:
        record = replace(payload, time=now, message=summary, body=body)
        fields: dict[str, Any] = {"server_id": server_id, **record.to_fields()}
        try:
            self._sink.emit(TRACE_SEVERITY, fields)
        except Exception as e:
            raise SinkError.write_failed(str(e)) from e

    def trace_request(
        self,
        server_id: str,
        payload: TracePayload,
        response_expected: bool,
        queue_length: int,
    ) -> None:
        if not self._policy.should_trace():
            return
        if queue_length < 0:
            raise ValueError(f"queue_length must be >= 0, got {queue_length}")

        body = self._body(ARGUMENTS_PREFIX, payload)
        summary = (
            f"Sending request: {kind_name(payload.kind)} ({format_latency(payload.latency)}). "
            f"Response expected: {'yes' if response_expected else 'no'}. "
            f"Current queue length: {queue_length}"
        )
        self._emit(server_id, payload, summary, body, self._clock())

    def trace_response(self, server_id: str, payload: TracePayload, meta: RequestMetadata) -> None:
        if not self._policy.should_trace():
            return

        body = self._body(RESULT_PREFIX, payload)
        now = self._clock()
        took = elapsed_ms(meta.queuing_start_time, now)
        summary = (
            f"Response received: {kind_name(payload.kind)} ({format_latency(payload.latency)}). "
            f"Request took {took} ms. "
            f"Success: {'true' if payload.success else 'false'}"
        )
        if not payload.success:
            summary += f". Message: {payload.error_message}"
        self._emit(server_id, payload, summary, body, now)

    def trace_request_completed(
        self,
        server_id: str,
        command: str,
        request_seq: int,
        meta: RequestMetadata,
    ) -> None:
        if not self._policy.should_trace():
            return

        now = self._clock()
        took = elapsed_ms(meta.queuing_start_time, now)
        summary = f"Async response received: {command} ({request_seq}). Request took {took} ms."
        payload = TracePayload(
            kind=MessageKind.RECEIVE_RESPONSE,
            protocol_type="response",
            id=str(request_seq),
        )
        self._emit(server_id, payload, summary, None, now)

    def trace_event(self, server_id: str, payload: TracePayload) -> None:
        if not self._policy.should_trace():
            return

        body = self._body(DATA_PREFIX, payload)
        summary = f"Event received: {payload.message} ({format_latency(payload.latency)})."
        self._emit(server_id, payload, summary, body, self._clock())


def new_tracer(
    config: InspectorConfig,
    clock: Callable[[], datetime] = utc_now,
    name: str | None = None,
) -> Tracer:
    """Build the tracer for one client session.

    Each session gets its own logger (``name``, or a fresh child of
    ``lspinspector.trace``), so sessions never share or close each other's
    outputs. Trace level ``off`` yields a NopTracer so no log outputs are
    opened.
    """
    level = config.level
    if level == TraceLevel.OFF:
        return NopTracer()
    logger = build_trace_logger(
        config.logging,
        name=name or f"{TRACE_LOGGER_NAME}.{uuid4().hex[:12]}",
    )
    return InspectorTracer(
        TraceLevelPolicy(level),
        StructlogSink(logger),
        clock=clock,
        logger=logger,
    )
