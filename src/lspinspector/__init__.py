"""LSP inspector: structured trace records for language-server protocol clients."""

from lspinspector.config import InspectorConfig, LoggingConfig, LogOutputConfig, load_config
from lspinspector.core.errors import InspectorError, SerializationError, SinkError
from lspinspector.protocol import (
    LogFormat,
    MessageKind,
    RequestMetadata,
    TraceLevel,
    TracePayload,
    format_name,
    kind_name,
)
from lspinspector.timefmt import decode_iso8601, encode_iso8601
from lspinspector.tracer import (
    InspectorTracer,
    NopTracer,
    StructlogSink,
    TraceLevelPolicy,
    Tracer,
    TraceSink,
    new_tracer,
)

__version__ = "0.1.0"

__all__ = [
    "InspectorConfig",
    "InspectorError",
    "InspectorTracer",
    "LogFormat",
    "LogOutputConfig",
    "LoggingConfig",
    "MessageKind",
    "NopTracer",
    "RequestMetadata",
    "SerializationError",
    "SinkError",
    "StructlogSink",
    "TraceLevel",
    "TraceLevelPolicy",
    "TracePayload",
    "TraceSink",
    "Tracer",
    "decode_iso8601",
    "encode_iso8601",
    "format_name",
    "kind_name",
    "load_config",
    "new_tracer",
]
