"""
Scripted playback of the canned opening message.

Used before the visitor has said anything: the opener is revealed word by
word at a typing cadence without calling the completion API.
"""
from typing import AsyncGenerator

from visionchat.utils.pacing import paced


async def opening_words(
    text: str, cumulative: bool = False
) -> AsyncGenerator[str, None]:
    """
    Split `text` on single spaces and yield one chunk per word.

    Incremental chunks carry the new word plus the separating space (none
    after the last word), so their concatenation is `text`. Cumulative
    chunks carry everything revealed so far, so the last chunk is `text`.
    """
    words = text.split(" ")
    revealed = ""

    for index, word in enumerate(words):
        chunk = word if index == len(words) - 1 else word + " "
        if cumulative:
            revealed += chunk
            yield revealed
        else:
            yield chunk


def play_opening(
    text: str,
    interval: float,
    cumulative: bool = False,
    maxsize: int = 0,
) -> AsyncGenerator[str, None]:
    """Replay `text` word by word, one chunk per `interval` seconds."""
    return paced(opening_words(text, cumulative=cumulative), interval, maxsize=maxsize)
