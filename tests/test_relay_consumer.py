"""
Test the Python relay consumer against the app over an in-process transport.
"""
import httpx
import pytest

from conftest import DONE, record
from visionchat.client import BotClient, ConversationView, TurnState
from visionchat.client.cli import _warn_if_missing
from visionchat.services.prompts import OPENING_MESSAGE


@pytest.fixture
def http_client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


async def test_open_streams_opener_into_first_slot(http_client):
    view = ConversationView()
    seen = []

    async with BotClient(http_client=http_client) as client:
        reply = await client.open(view, on_fragment=seen.append)

    assert reply == OPENING_MESSAGE
    assert view.messages == [OPENING_MESSAGE]
    assert "".join(seen) == OPENING_MESSAGE
    assert view.state == TurnState.FINALIZED
    assert view.streaming_index is None
    await http_client.aclose()


async def test_send_appends_turn_and_reply(http_client, upstream):
    view = ConversationView()

    async with BotClient(http_client=http_client) as client:
        await client.open(view)
        reply = await client.send(view, "  who are you?  ")

    assert reply == "Hello there"
    assert view.messages == [OPENING_MESSAGE, "who are you?", "Hello there"]
    assert view.last_reply == "Hello there"

    sent = upstream.requests[0]["messages"]
    assert [m["role"] for m in sent] == ["system", "assistant", "assistant", "user"]
    assert sent[-1]["content"] == "who are you?"
    await http_client.aclose()


async def test_blank_draft_is_not_sent(http_client, upstream):
    view = ConversationView()

    async with BotClient(http_client=http_client) as client:
        await client.open(view)
        assert await client.send(view, "   ") is None

    assert view.messages == [OPENING_MESSAGE]
    assert upstream.requests == []
    await http_client.aclose()


async def test_send_while_streaming_is_ignored(http_client, upstream):
    view = ConversationView()
    view.begin_turn()

    async with BotClient(http_client=http_client) as client:
        assert await client.send(view, "hello?") is None

    assert view.messages == []
    assert view.is_streaming
    await http_client.aclose()


async def test_rejected_request_raises_and_finalizes():
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "Bad Request"}))
    view = ConversationView()

    async with BotClient(http_client=httpx.AsyncClient(transport=transport, base_url="http://test")) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.open(view)

    assert view.state == TurnState.FINALIZED
    assert view.messages == []


def test_view_state_machine():
    view = ConversationView()
    assert view.state == TurnState.IDLE
    assert view.can_send("hi")

    view.begin_turn()
    assert not view.can_send("hi")
    with pytest.raises(RuntimeError):
        view.begin_turn()

    view.append_fragment("Hel")
    view.append_fragment("lo")
    assert view.messages == ["Hello"]

    view.finalize()
    assert view.state == TurnState.FINALIZED
    assert view.can_send("hi")
    assert not view.can_send("")
    with pytest.raises(RuntimeError):
        view.append_fragment("late")


async def test_empty_reply_leaves_no_slot(http_client, upstream):
    upstream.chunks = [record(role="assistant"), DONE]
    view = ConversationView()

    async with BotClient(http_client=http_client) as client:
        await client.open(view)
        reply = await client.send(view, "who are you?")
        assert reply == ""
        assert view.messages == [OPENING_MESSAGE, "who are you?"]
        assert view.state == TurnState.FINALIZED
        assert view.reply_missing

        # The next visitor turn takes the bot's index and is sent as assistant
        await client.send(view, "hello?")

    sent = upstream.requests[1]["messages"]
    assert [m["role"] for m in sent] == ["system", "assistant", "assistant", "user", "assistant"]
    assert sent[-1]["content"] == "hello?"
    await http_client.aclose()


def test_reply_missing_tracks_transcript_parity():
    view = ConversationView()
    view.messages = ["opener"]
    assert not view.reply_missing

    view.messages.append("visitor turn")
    assert view.reply_missing

    view.begin_turn()
    assert not view.reply_missing


def test_cli_warns_when_reply_is_missing(capsys):
    view = ConversationView()
    view.messages = ["opener", "visitor turn"]

    _warn_if_missing(view)
    assert "no reply from the bot" in capsys.readouterr().err

    view.messages.append("bot turn")
    _warn_if_missing(view)
    assert capsys.readouterr().err == ""
