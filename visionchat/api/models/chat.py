"""
Request and message models for the bot endpoint.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """Payload for the bot endpoint.

    - messages: raw text turns, alternating bot/visitor, oldest first
    """
    messages: List[str]


class Message(BaseModel):
    """Role-tagged message in the shape the completion API expects."""

    role: Literal["system", "assistant", "user"]
    content: str
    name: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
