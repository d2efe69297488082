#!/usr/bin/env python3
"""
estate_match/listing_chat/main.py

CLI entrypoint for follow-up questions about a listing.

Reads the listing file, opens a ListingChat and relays questions typed on
stdin until the user types "exit" (or "reset" to start over).
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from estate_match.engine.engine_client import EngineClient
from estate_match.errors import EstateMatchError
from estate_match.listing_chat.features.chat_session.chat_session import ListingChat, create_chat

EXIT_WORDS = {"exit", "quit", "q"}


def chat_loop(handle: ListingChat, read: Callable[[str], str] = input) -> None:
    """
    Drive a ListingChat from the terminal.

    Args:
        handle: The chat session to talk to.
        read:   Prompt-and-read function (input() by default).
    """
    print(f"\nAssistant: {handle.turns[0].text}\n")
    while True:
        try:
            user_input = read("You: ")
        except EOFError:
            break

        command = user_input.strip().lower()
        if command in EXIT_WORDS:
            break
        if command == "reset":
            handle.reset()
            print(f"\nAssistant: {handle.turns[0].text}\n")
            continue
        if not command:
            continue

        reply = handle.send(user_input)
        print(f"\nAssistant: {reply}\n")


def main():
    parser = argparse.ArgumentParser(description="Ask follow-up questions about a listing")
    parser.add_argument(
        "--listing", type=Path, required=True,
        help="Path to a text file holding the pasted listing"
    )
    parser.add_argument(
        "--model", type=str, default=None,
        help="OpenAI model name (default: ESTATE_MATCH_MODEL or gpt-4o)"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        listing_text = args.listing.read_text(encoding="utf-8")
    except OSError as e:
        sys.exit(f"❌ Failed to load listing '{args.listing}': {e}")

    try:
        engine = EngineClient(model=args.model)
        handle = create_chat(engine, listing_text)
    except EstateMatchError as e:
        sys.exit(f"❌ {e}")

    chat_loop(handle)


if __name__ == "__main__":
    main()
