# tests/test_listing_chat.py
"""
Listing Chat

Purpose
-------
A chat handle is bound to one listing, starts with a local greeting that never
reaches the engine, and survives failed turns by showing an error notice.
"""

from types import SimpleNamespace

import pytest

from estate_match.analysis.features.contract_builder.contract_builder import CHAT_LISTING_CHAR_LIMIT
from estate_match.engine.engine_client import EngineClient
from estate_match.errors import EngineError, InputError
from estate_match.listing_chat.features.chat_session.chat_session import (
    ChatRole,
    ChatTurn,
    create_chat,
    send,
)
from estate_match.listing_chat.features.prompts import ERROR_NOTICE, GREETING, NOT_MENTIONED_REPLY
from estate_match.listing_chat.main import chat_loop
from tests.utils import make_openai_client


def test_chat_is_seeded_with_listing_scoped_instructions(fake_engine, rental_listing):
    engine = fake_engine()
    create_chat(engine, rental_listing)

    instructions = engine.sessions[0].instructions
    assert "Answer ONLY using the listing text below." in instructions
    assert NOT_MENTIONED_REPLY in instructions
    assert "Do not volunteer outside knowledge about the neighborhood" in instructions
    assert instructions.endswith(rental_listing)
    assert engine.calls == []


def test_first_turn_is_a_local_greeting(fake_engine, rental_listing):
    engine = fake_engine(chat_replies=["$2,300/month."])
    handle = create_chat(engine, rental_listing)

    assert handle.turns == [ChatTurn(role=ChatRole.MODEL, text=GREETING)]

    send(handle, "How much is rent?")
    assert engine.sessions[0].sent == ["How much is rent?"]


def test_send_appends_user_and_model_turns(fake_engine, rental_listing):
    engine = fake_engine(chat_replies=["12-month fixed lease.", "$1,150."])
    handle = create_chat(engine, rental_listing)

    assert send(handle, "How long is the lease?") == "12-month fixed lease."
    assert handle.send("Deposit?") == "$1,150."

    assert [(t.role, t.text) for t in handle.get_history()] == [
        (ChatRole.MODEL, GREETING),
        (ChatRole.USER, "How long is the lease?"),
        (ChatRole.MODEL, "12-month fixed lease."),
        (ChatRole.USER, "Deposit?"),
        (ChatRole.MODEL, "$1,150."),
    ]


def test_pet_restriction_is_relayed(fake_engine):
    reply = 'No. The listing says "No pets allowed", so a dog is not permitted.'
    engine = fake_engine(chat_replies=[reply])
    handle = create_chat(engine, "No pets allowed")

    instructions = engine.sessions[0].instructions
    assert "No pets allowed" in instructions
    assert "Never invent exceptions" in instructions

    answer = send(handle, "Can I have a dog?")
    assert "No pets allowed" in answer
    assert handle.turns[-1] == ChatTurn(role=ChatRole.MODEL, text=reply)


def test_failed_turn_shows_error_notice_and_session_survives(fake_engine, rental_listing):
    engine = fake_engine(chat_replies=[EngineError("down"), "Shared laundry."])
    handle = create_chat(engine, rental_listing)

    assert send(handle, "Laundry?") == ERROR_NOTICE
    assert handle.turns[-1] == ChatTurn(role=ChatRole.MODEL, text=ERROR_NOTICE)

    assert send(handle, "Laundry?") == "Shared laundry."
    assert len(handle.turns) == 5


def test_empty_completion_from_real_client_shows_error_notice():
    engine = EngineClient(api_key="sk-test", client=make_openai_client(SimpleNamespace(choices=[])))
    handle = create_chat(engine, "No pets allowed")

    assert send(handle, "Can I have a dog?") == ERROR_NOTICE
    assert handle.turns[-1] == ChatTurn(role=ChatRole.MODEL, text=ERROR_NOTICE)
    assert handle._session.get_history() == []


def test_blank_message_is_rejected(fake_engine, rental_listing):
    engine = fake_engine()
    handle = create_chat(engine, rental_listing)

    with pytest.raises(InputError):
        send(handle, "   ")
    assert len(handle.turns) == 1
    assert engine.sessions[0].sent == []


def test_blank_listing_is_rejected(fake_engine):
    engine = fake_engine()
    with pytest.raises(InputError):
        create_chat(engine, " \n ")
    assert engine.sessions == []


def test_chat_seed_is_cut_at_exact_limit(fake_engine):
    engine = fake_engine()
    head = "y" * CHAT_LISTING_CHAR_LIMIT
    create_chat(engine, head + "TAIL_MARKER")

    instructions = engine.sessions[0].instructions
    assert instructions.endswith(head)
    assert "TAIL_MARKER" not in instructions


def test_reset_keeps_greeting_and_opens_new_session(fake_engine, rental_listing):
    engine = fake_engine(chat_replies=["Yes."])
    handle = create_chat(engine, rental_listing)
    send(handle, "Utilities included?")

    handle.reset()

    assert handle.turns == [ChatTurn(role=ChatRole.MODEL, text=GREETING)]
    assert len(engine.sessions) == 2
    assert engine.sessions[1].sent == []


def test_chat_loop_relays_until_exit(fake_engine, rental_listing, capsys):
    engine = fake_engine(chat_replies=["Shared laundry."])
    handle = create_chat(engine, rental_listing)
    scripted = iter(["Laundry?", "", "reset", "exit", "never read"])

    chat_loop(handle, read=lambda prompt: next(scripted))

    out = capsys.readouterr().out
    assert "Assistant: Shared laundry." in out
    assert out.count(GREETING) == 2
    assert engine.sessions[0].sent == ["Laundry?"]
    assert len(engine.sessions) == 2


def test_chat_loop_stops_on_eof(fake_engine, rental_listing):
    handle = create_chat(fake_engine(), rental_listing)

    def _eof(prompt):
        raise EOFError

    chat_loop(handle, read=_eof)
    assert len(handle.turns) == 1
