from .chat import ChatRequest, Message
from .error import ErrorResponse

__all__ = [
    "ErrorResponse",
    "ChatRequest",
    "Message",
]
