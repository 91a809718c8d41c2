"""
Terminal chat against a running server.

Usage:
    visionchat-chat [base_url]

Prints the scripted opener as it streams, then alternates between reading
a line from the terminal and streaming the bot's reply.
"""
import asyncio
import sys

import httpx

from visionchat.client.relay_consumer import BotClient, ConversationView


def _write(fragment: str) -> None:
    sys.stdout.write(fragment)
    sys.stdout.flush()


def _warn_if_missing(view: ConversationView) -> None:
    if view.reply_missing:
        print(
            "(no reply from the bot; your next message will be sent in its place)",
            file=sys.stderr,
        )


async def chat(base_url: str) -> None:
    view = ConversationView()

    async with BotClient(base_url=base_url) as client:
        await client.open(view, on_fragment=_write)
        print("\n")
        _warn_if_missing(view)

        while True:
            try:
                draft = await asyncio.to_thread(input, "> ")
            except EOFError:
                break

            if draft.strip() in ("/quit", "/exit"):
                break

            reply = await client.send(view, draft, on_fragment=_write)
            if reply is not None:
                print("\n")
                _warn_if_missing(view)


def main() -> None:
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

    try:
        asyncio.run(chat(base_url))
    except httpx.ConnectError:
        print(f"\nCould not connect to server at {base_url}")
        print("Make sure the server is running: python main.py or uvicorn main:app")
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        print(f"\nServer error: HTTP {e.response.status_code}")
        sys.exit(1)
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
