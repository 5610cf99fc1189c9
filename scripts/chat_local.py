#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp).

Usage:
  ENV=dev python3 scripts/chat_local.py

Sends typed messages through the same HandleIncomingMessageUseCase the webhook
uses. With ENV=dev and no credentials every collaborator is an in-process mock,
so the booking flow runs against MockCalendar.
"""

from __future__ import annotations

import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from agendabot.domain.entities.message import InboundMessage  # noqa: E402
from agendabot.wiring.dependencies import (  # noqa: E402
    get_handle_incoming_message_use_case,
    get_session_store,
)


def _print_header(sender_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"sender: {sender_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (new sender), /quit")
    print("-" * 60)


def _new_sender() -> str:
    return f"whatsapp:+55610000{uuid.uuid4().int % 100000:05d}"


def main() -> int:
    use_case = get_handle_incoming_message_use_case()
    sessions = get_session_store()
    sender_id = _new_sender()
    _print_header(sender_id)

    while True:
        try:
            text = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not text:
            continue
        if text == "/quit":
            return 0
        if text == "/new":
            sender_id = _new_sender()
            _print_header(sender_id)
            continue

        try:
            reply = use_case.handle(InboundMessage(sender_id=sender_id, text=text))
        except Exception as e:
            print(f"[error] {type(e).__name__}: {e}")
            continue

        session = sessions.get(sender_id)
        print(f"bot> {reply}")
        print(f"     [state={session.booking_status if session else None}]")


if __name__ == "__main__":
    sys.exit(main())
