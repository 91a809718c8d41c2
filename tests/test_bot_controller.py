from conftest import DONE, FakeUpstream, record
from visionchat.api.models.chat import ChatRequest
from visionchat.controllers.bot_controller import BotController
from visionchat.services.completion import CompletionClient
from visionchat.services.prompts import OPENING_MESSAGE


async def reply(controller, turns):
    request = ChatRequest(messages=turns)
    return "".join([f async for f in controller.reply_stream(request)])


async def test_opener_does_not_create_completion_client(settings):
    controller = BotController(settings)

    assert await reply(controller, []) == OPENING_MESSAGE
    assert controller._completion is None


async def test_shared_completion_client_stays_open(settings):
    upstream = FakeUpstream([record("Hello"), DONE])
    shared = CompletionClient(settings, http_client=upstream.http_client())

    first = await reply(BotController(settings, completion=shared), ["hi"])
    second = await reply(BotController(settings, completion=shared), ["hi", "again"])

    assert first == second == "Hello"
    assert len(upstream.requests) == 2
    await shared.aclose()


async def test_owned_completion_client_is_closed(settings, monkeypatch):
    upstream = FakeUpstream([record("Hello"), DONE])
    closed = []

    def make_client(settings):
        client = CompletionClient(settings, http_client=upstream.http_client())
        original_aclose = client.aclose

        async def aclose():
            closed.append(True)
            await original_aclose()

        client.aclose = aclose
        return client

    monkeypatch.setattr(
        "visionchat.controllers.bot_controller.CompletionClient", make_client
    )

    assert await reply(BotController(settings), ["hi"]) == "Hello"
    assert closed == [True]


async def test_disconnect_during_paced_reply_releases_upstream(settings):
    settings.live_interval_ms = 5
    upstream = FakeUpstream(
        [record(str(index)) for index in range(50)] + [DONE], delay=0.002
    )
    shared = CompletionClient(settings, http_client=upstream.http_client())
    controller = BotController(settings, completion=shared)

    stream = controller.reply_stream(ChatRequest(messages=["hi"]))
    assert await stream.__anext__() == "0"
    await stream.aclose()

    assert upstream.streams[0].closed
    await shared.aclose()
