"""
Parsing of the completion API's streaming body.

The body is a newline-delimited sequence of event records:

    data: {"choices": [{"delta": {"content": "Hel"}}], ...}
    data: {"choices": [{"delta": {"content": "lo"}}], ...}
    data: [DONE]

Lines arrive already split and decoded (httpx's line iterator); this
module turns one line into a payload and one payload into a delta.
"""
import json
from typing import Optional

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class EventRecordError(ValueError):
    """Raised when an event record cannot be parsed into a delta."""

    def __init__(self, record: str, reason: str):
        self.record = record
        self.reason = reason
        super().__init__(f"Malformed event record ({reason}): {record[:200]!r}")


def record_payload(line: str) -> Optional[str]:
    """
    Payload of one body line with the `data: ` prefix removed.

    Returns None for blank lines, which separate records.
    """
    line = line.rstrip("\r")
    if line == "":
        return None
    if line.startswith(DATA_PREFIX):
        return line[len(DATA_PREFIX):]
    return line


def extract_fragment(payload: str) -> Optional[str]:
    """
    Pull the incremental text out of one event record payload.

    Returns None when the record carries no content (role-only or final
    chunks).

    Raises:
        EventRecordError: If the payload is not JSON or lacks choices[0].delta
    """
    try:
        record = json.loads(payload)
    except json.JSONDecodeError as e:
        raise EventRecordError(payload, f"invalid JSON: {e.msg}") from e

    try:
        delta = record["choices"][0]["delta"]
    except (KeyError, IndexError, TypeError) as e:
        raise EventRecordError(payload, "missing choices[0].delta") from e

    if not isinstance(delta, dict):
        raise EventRecordError(payload, "delta is not an object")

    content = delta.get("content")
    if content is None:
        return None
    if not isinstance(content, str):
        raise EventRecordError(payload, "delta content is not text")

    return content
