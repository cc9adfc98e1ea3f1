"""Chat with a webhook-backed agent from the terminal.

Modes:
    python -m chat.run_chat            interactive line-based CLI
    python -m chat.run_chat --tui      Textual TUI
    python -m chat.run_chat --api      FastAPI server

``--url`` saves a new webhook URL before starting.
"""

import argparse
import asyncio
import sys

from chat.config import CHAT_API_PORT, LOG_DIR, LOG_LEVEL
from chat.config_store import ConfigStore
from chat.service import ChatSession, InvalidEndpointError
from shared.logging_setup import setup_logger


# ════════════════════════════════════════════════════════════
#  INTERACTIVE CLI
# ════════════════════════════════════════════════════════════

async def chat_loop(session: ChatSession) -> None:
    """Interactive conversation loop, one message in flight at a time."""
    print(f"\n  Webhook: {session.endpoint_url}")
    print("\nCommands:")
    print("  Type your message to chat")
    print("  'test'  — test the webhook connection")
    print("  'clear' — reset the conversation")
    print("  'quit'  — exit\n")

    while True:
        try:
            user_input = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            return

        if not user_input:
            continue
        if user_input.lower() in ("quit", "exit", "q"):
            print("Goodbye!")
            return
        if user_input.lower() == "clear":
            session.clear()
            print("[Chat cleared]\n")
            continue
        if user_input.lower() == "test":
            try:
                result = await session.test_endpoint(session.endpoint_url)
            except InvalidEndpointError as e:
                print(f"[{e}]\n")
                continue
            print(f"[{result.message}]\n")
            continue

        reply, outcome = await session.send(user_input)
        print(f"\nAssistant: {reply.content}\n")
        if not outcome.ok:
            print(f"[{outcome.kind.value}: {outcome.detail}]\n", file=sys.stderr)


async def main_cli(session: ChatSession) -> None:
    print("=" * 60)
    print("  Webhook Chat Assistant")
    print("=" * 60)
    await chat_loop(session)


async def main_tui(session: ChatSession) -> None:
    """Launch the TUI version of the chat."""
    from chat.tui.app import ChatTuiApp

    app = ChatTuiApp(session=session)
    await app.run_async()


def main_api() -> None:
    import uvicorn

    uvicorn.run("chat.chat_api:app", host="0.0.0.0", port=CHAT_API_PORT)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Webhook Chat Assistant")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--tui", action="store_true", help="Launch TUI interface")
    mode.add_argument("--api", action="store_true", help="Serve the HTTP API")
    parser.add_argument("--url", help="Save this webhook URL before starting")
    args = parser.parse_args(argv)

    # Interactive modes own the terminal, so they only log to file
    setup_logger(
        "chat_relay", LOG_DIR, "chat.log", level=LOG_LEVEL, console=args.api
    )

    session = ChatSession(ConfigStore())
    if args.url:
        try:
            session.save_endpoint(args.url, probe=False)
        except InvalidEndpointError as e:
            parser.error(str(e))

    if args.api:
        main_api()
    elif args.tui:
        asyncio.run(main_tui(session))
    else:
        asyncio.run(main_cli(session))


if __name__ == "__main__":
    main()
