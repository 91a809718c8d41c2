from .client import CompletionClient
from .event_stream import (
    DONE_SENTINEL,
    EventRecordError,
    record_payload,
    extract_fragment,
)

__all__ = [
    "CompletionClient",
    "DONE_SENTINEL",
    "EventRecordError",
    "record_payload",
    "extract_fragment",
]
