#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps the dialogue state in memory and passes it back each turn, like a browser client would
- Sends your typed messages through the same HandleTurnUseCase the API uses
- Prints the decision details (intent, action, step) and the reply text
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.dto.dialogue_state import serialize_dialogue_state  # noqa: E402
from app.domain.entities.booking_state import DialogueState  # noqa: E402
from app.wiring.dependencies import get_handle_turn_use_case, get_timezone  # noqa: E402


def _print_header() -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print("Type your message and press Enter.")
    print("Commands: /new (drop booking state), /state, /quit, /help")
    print("-" * 60)


def main() -> None:
    use_case = get_handle_turn_use_case()
    tz = get_timezone()
    state: DialogueState | None = None
    history: list[dict[str, str]] = []
    _print_header()

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new   -> forget the booking in progress and the chat history")
            print("  /state -> show the serialized dialogue state")
            print("  /quit  -> exit")
            continue
        if cmd == "/new":
            state = None
            history = []
            print("State cleared.")
            continue
        if cmd == "/state":
            print(json.dumps(serialize_dialogue_state(state, tz), indent=2))
            continue

        turn = use_case.execute(user_text, state, history=history)
        state = turn.state
        history.extend(
            [
                {"role": "user", "content": user_text},
                {"role": "assistant", "content": turn.reply},
            ]
        )

        print("\n--- Decision ---")
        print(f"intent: {turn.intent.value}")
        print(f"action: {turn.action}")
        print(f"step: {state.step.value if state else '-'}")

        print("\n--- Reply ---")
        print(turn.reply.strip())
        print("-" * 60)


if __name__ == "__main__":
    main()
