"""
Streaming client for the chat-completion API.

Requests incremental output and reads the raw event stream line by line,
so each delta is relayed as soon as its record is complete.
"""
import logging
from typing import AsyncGenerator, Optional, Sequence

import httpx
import openai
from openai import AsyncOpenAI

from visionchat.api.models.chat import Message
from visionchat.config.settings import Settings, get_settings
from visionchat.services.completion.event_stream import (
    DONE_SENTINEL,
    EventRecordError,
    extract_fragment,
    record_payload,
)

logger = logging.getLogger(__name__)

# Deterministic sampling
TEMPERATURE = 0


class CompletionClient:
    """Relays completion deltas from the upstream API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the completion client.

        Args:
            settings: Application settings (defaults to cached settings)
            http_client: Optional transport override, mainly for tests
        """
        settings = settings or get_settings()
        self.model = settings.openai_model
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def stream_fragments(
        self, messages: Sequence[Message]
    ) -> AsyncGenerator[str, None]:
        """
        Stream completion fragments for a conversation.

        Stops at the [DONE] record without looking at anything buffered
        after it. Malformed records are logged and skipped. Upstream
        failures are logged and end the stream; nothing is raised because
        the response to the client has already started.

        Args:
            messages: Serialized conversation, system message first

        Yields:
            Text fragments in upstream order
        """
        try:
            async with self.client.chat.completions.with_streaming_response.create(
                model=self.model,
                messages=[message.to_payload() for message in messages],
                temperature=TEMPERATURE,
                stream=True,
            ) as response:
                async for line in response.iter_lines():
                    payload = record_payload(line)
                    if payload is None:
                        continue
                    if payload == DONE_SENTINEL:
                        logger.debug("Upstream stream finished")
                        return
                    fragment = self._fragment(payload)
                    if fragment:
                        yield fragment

                logger.warning("Upstream stream ended without [DONE]")

        except (openai.APIError, httpx.HTTPError) as e:
            logger.error(f"Completion streaming error: {type(e).__name__}: {e}")

    @staticmethod
    def _fragment(payload: str) -> Optional[str]:
        try:
            return extract_fragment(payload)
        except EventRecordError as e:
            logger.warning(str(e))
            return None

    async def aclose(self) -> None:
        await self.client.close()
