"""
Bot controller for the recruiting chat.

Picks between the scripted opener and the live completion relay and
produces the text stream returned to the page.
"""
import logging
from contextlib import aclosing
from typing import AsyncGenerator, Optional

from visionchat.api.models.chat import ChatRequest
from visionchat.config.settings import Settings, get_settings
from visionchat.services.completion import CompletionClient
from visionchat.services.conversation import is_opening, serialize_messages
from visionchat.services.playback import play_opening
from visionchat.utils.pacing import paced

logger = logging.getLogger(__name__)


class BotController:
    """Controller for bot reply streaming."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        completion: Optional[CompletionClient] = None,
    ):
        """
        Initialize bot controller.

        Args:
            settings: Application settings (defaults to cached settings)
            completion: Shared completion client, left open; if omitted one is
                created on the first live reply and closed when it ends
        """
        self.settings = settings or get_settings()
        self._completion = completion
        self._owns_completion = completion is None

    @property
    def completion(self) -> CompletionClient:
        if self._completion is None:
            self._completion = CompletionClient(self.settings)
        return self._completion

    async def reply_stream(self, request: ChatRequest) -> AsyncGenerator[str, None]:
        """
        Generate the bot's next reply as a stream of text fragments.

        Before the visitor has spoken, the canned opener is replayed
        locally. Otherwise the conversation goes to the completion API
        and its deltas are relayed in order.

        Args:
            request: ChatRequest with the full turn history

        Yields:
            Text fragments; the page concatenates them
        """
        messages = serialize_messages(request.messages)

        try:
            if is_opening(messages):
                logger.debug("Replaying opening message")
                fragments = play_opening(
                    messages[1].content,
                    self.settings.opening_interval,
                    maxsize=self.settings.pacing_queue_size,
                )
            else:
                logger.debug(f"Relaying completion for {len(messages)} messages")
                fragments = paced(
                    self.completion.stream_fragments(messages),
                    self.settings.live_interval,
                    maxsize=self.settings.pacing_queue_size,
                )

            async with aclosing(fragments) as relay:
                async for fragment in relay:
                    yield fragment
        finally:
            if self._owns_completion and self._completion is not None:
                await self._completion.aclose()
                self._completion = None
