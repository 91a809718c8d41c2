"""
Client side of the bot relay.

ConversationView keeps the transcript the page shows; BotClient posts the
history and appends the streamed reply into the view as it arrives.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional

import httpx

logger = logging.getLogger(__name__)

BOT_PATH = "/api/bot"


class TurnState(str, Enum):
    """Lifecycle of one bot turn."""

    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZED = "finalized"


class ConversationView:
    """
    Transcript plus the state of the bot turn in progress.

    messages[0] is the bot's opener; turns alternate bot/visitor after it.
    The slot for a streamed reply is created on its first fragment, so a
    failed or empty reply leaves no slot. The next visitor turn then lands
    on an even index and the server tags it as an assistant turn; callers
    should check `reply_missing` before sending.
    """

    def __init__(self):
        self.messages: List[str] = []
        self.state = TurnState.IDLE
        self.streaming_index: Optional[int] = None

    @property
    def is_streaming(self) -> bool:
        return self.state == TurnState.STREAMING

    def can_send(self, draft: str) -> bool:
        return not self.is_streaming and draft.strip() != ""

    def begin_turn(self) -> None:
        if self.is_streaming:
            raise RuntimeError("A bot turn is already streaming")
        self.state = TurnState.STREAMING
        self.streaming_index = None

    def append_fragment(self, fragment: str) -> None:
        if not self.is_streaming:
            raise RuntimeError("No bot turn is streaming")
        if self.streaming_index is None:
            self.streaming_index = len(self.messages)
            self.messages.append("")
        self.messages[self.streaming_index] += fragment

    def finalize(self) -> None:
        self.state = TurnState.FINALIZED
        self.streaming_index = None

    @property
    def reply_missing(self) -> bool:
        """True when the last bot turn produced no text and left no slot."""
        return not self.is_streaming and len(self.messages) % 2 == 0

    @property
    def last_reply(self) -> str:
        """Text of the most recent bot turn, or "" if there is none."""
        # Bot turns sit at even indices
        for index in range(len(self.messages) - 1, -1, -1):
            if index % 2 == 0:
                return self.messages[index]
        return ""


class BotClient:
    """Async client for the bot endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        """
        Initialize bot client.

        Args:
            base_url: Server root URL
            http_client: Optional preconfigured client (e.g. ASGI transport in tests)
            timeout: Request timeout in seconds
        """
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def request_reply(
        self,
        view: ConversationView,
        on_fragment: Optional[Callable[[str], None]] = None,
    ) -> str:
        """
        Stream the bot's next turn into `view`.

        Args:
            view: Conversation to extend; its current messages are sent as history
            on_fragment: Called with each fragment after it is appended

        Returns:
            The finished bot turn text

        Raises:
            httpx.HTTPStatusError: If the server rejects the request
        """
        history = list(view.messages)
        view.begin_turn()
        received = []

        try:
            async with self.http_client.stream(
                "POST", BOT_PATH, json={"messages": history}
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    response.raise_for_status()

                async for fragment in response.aiter_text():
                    if not fragment:
                        continue
                    view.append_fragment(fragment)
                    received.append(fragment)
                    if on_fragment is not None:
                        on_fragment(fragment)
        finally:
            view.finalize()

        return "".join(received)

    async def open(
        self,
        view: ConversationView,
        on_fragment: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Fetch the scripted opener for an empty conversation."""
        return await self.request_reply(view, on_fragment=on_fragment)

    async def send(
        self,
        view: ConversationView,
        draft: str,
        on_fragment: Optional[Callable[[str], None]] = None,
    ) -> Optional[str]:
        """
        Submit a visitor turn and stream the reply.

        Returns None without sending when a reply is still streaming or the
        draft is blank.
        """
        if not view.can_send(draft):
            logger.debug("Send ignored: reply streaming or empty draft")
            return None

        view.messages.append(draft.strip())
        return await self.request_reply(view, on_fragment=on_fragment)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "BotClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
