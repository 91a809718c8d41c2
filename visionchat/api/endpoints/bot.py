"""
Bot endpoint.

Streams the recruiting bot's next reply as plain text.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from visionchat.api.models import ErrorResponse, ChatRequest
from visionchat.controllers.bot_controller import BotController

# ============================================================================
# Dependency Injection
# ============================================================================


def get_bot_controller() -> BotController:
    """Dependency injection for BotController."""
    return BotController()


# ============================================================================
# Router
# ============================================================================

router = APIRouter()


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/bot",
    status_code=status.HTTP_200_OK,
    response_class=StreamingResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def bot_reply(
    request: ChatRequest,
    controller: BotController = Depends(get_bot_controller),
) -> StreamingResponse:
    """
    Bot reply endpoint with streaming response.

    Takes the full turn history and returns the bot's next turn. With no
    turns the canned opener is replayed; otherwise the conversation is
    sent to the completion API and its deltas are relayed as they arrive.

    Body validation happens before the stream starts, so a bad body gets
    a 400 rather than an empty 200.
    """
    return StreamingResponse(
        controller.reply_stream(request),
        media_type="text/plain",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
