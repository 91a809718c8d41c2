"""
Conversation serialization.

Turns the flat list of text turns the page keeps into the role-tagged
message list sent to the completion API.
"""
from typing import List, Sequence

from visionchat.api.models.chat import Message
from visionchat.services.prompts import OPENING_MESSAGE, SYSTEM_PROMPT

# System instruction + canned opening
SEED_LENGTH = 2


def seed_messages() -> List[Message]:
    """Messages every conversation starts with."""
    return [
        Message(role="system", content=SYSTEM_PROMPT),
        Message(role="assistant", content=OPENING_MESSAGE),
    ]


def serialize_messages(turns: Sequence[str]) -> List[Message]:
    """
    Build the upstream message list for a turn history.

    Turns are appended after the two seed messages; the turn at overall
    index i is from the assistant when i is even and from the user when odd.
    The page's transcript starts with the bot's streamed opener, so the
    first turn (index 2) is always tagged assistant.

    Args:
        turns: Raw text turns, oldest first

    Returns:
        List of len(turns) + 2 messages
    """
    messages = seed_messages()

    for index, turn in enumerate(turns):
        messages.append(
            Message(content=turn, role="assistant" if index % 2 == 0 else "user")
        )

    return messages


def is_opening(messages: Sequence[Message]) -> bool:
    """True when the visitor has not spoken yet and the opener should be replayed."""
    return len(messages) == SEED_LENGTH
