"""
estate_match/listing_chat/features/chat_session/chat_session.py

ListingChat: a conversation bound to one listing's text at creation time.
Handles:
  - Seeding an engine session with the listing-scoped instruction profile
  - An append-only list of ChatTurns, starting with a local greeting
  - Local recovery from failed turns (an error notice turn, session stays usable)

The caller owns the handle and must not send a second turn before the first
returns. Dropping the handle drops the history; nothing is persisted.
"""

import logging
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict

from estate_match.engine.engine_client import EngineClient
from estate_match.errors import EngineError, InputError
from estate_match.listing_chat.features.prompts import (
    ERROR_NOTICE,
    GREETING,
    build_chat_instructions,
)

logger = logging.getLogger(__name__)


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    text: str


class ListingChat:
    """
    Follow-up Q&A about a single listing.
    """

    def __init__(self, engine: EngineClient, listing_text: str):
        """
        Args:
            engine:       Engine client shared with the analysis pipeline.
            listing_text: The listing the whole conversation is scoped to.
        """
        if not listing_text or not listing_text.strip():
            raise InputError("Cannot start a chat without listing text.")
        self.engine = engine
        self.listing_text = listing_text
        self._session = engine.start_chat(build_chat_instructions(listing_text))
        self.turns: List[ChatTurn] = [ChatTurn(role=ChatRole.MODEL, text=GREETING)]

    def send(self, text: str) -> str:
        """
        Send one user message and return the reply (or the error notice).

        Raises:
            InputError: If `text` is blank.
        """
        if not text or not text.strip():
            raise InputError("Cannot send an empty message.")

        self.turns.append(ChatTurn(role=ChatRole.USER, text=text))
        try:
            reply = self._session.send(text)
        except EngineError as e:
            logger.warning("Chat turn failed, showing error notice: %s", e)
            reply = ERROR_NOTICE

        self.turns.append(ChatTurn(role=ChatRole.MODEL, text=reply))
        return reply

    def reset(self) -> None:
        """
        Start over on the same listing: only the greeting is kept and the engine
        session is replaced so earlier turns no longer count as context.
        """
        self._session = self.engine.start_chat(build_chat_instructions(self.listing_text))
        self.turns = self.turns[:1]

    def get_history(self) -> List[ChatTurn]:
        return list(self.turns)


def create_chat(engine: EngineClient, listing_text: str) -> ListingChat:
    return ListingChat(engine, listing_text)


def send(handle: ListingChat, text: str) -> str:
    return handle.send(text)
