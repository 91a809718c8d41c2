from .bot_prompts import (
    SYSTEM_PROMPT,
    OPENING_MESSAGE,
)

__all__ = [
    "SYSTEM_PROMPT",
    "OPENING_MESSAGE",
]
