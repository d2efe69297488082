"""
estate_match/listing_chat/features/prompts.py

Instruction profile for follow-up questions about one listing. Narrower than
the analysis profile: no scoring, no schema, only the listing text.
"""

from estate_match.analysis.features.contract_builder.contract_builder import (
    CHAT_LISTING_CHAR_LIMIT,
    truncate_listing,
)

NOT_MENTIONED_REPLY = "The listing doesn't mention that."

CHAT_SYSTEM_PROMPT = (
    "You are a real estate assistant answering follow-up questions about ONE listing. "
    "Answer ONLY using the listing text below.\n"
    f"  - If the listing does not contain the answer, say exactly: \"{NOT_MENTIONED_REPLY}\" "
    "and, if useful, suggest asking the listing agent.\n"
    "  - If the listing states a restriction (pets, smoking, rentals, renovations...), report the "
    "restriction as written. Never invent exceptions or loopholes.\n"
    "  - Do not volunteer outside knowledge about the neighborhood, schools or market unless the "
    "user explicitly asks for it, and label it as general knowledge when you do.\n"
    "  - Keep answers short and quote the listing when it helps.\n\n"
    "LISTING TEXT:\n"
)

# Shown as the first turn of every conversation; never sent to the engine
GREETING = (
    "I've read this listing. Ask me anything about it: fees, layout, policies, "
    "or what the text leaves out."
)

ERROR_NOTICE = "Error: Could not reach the AI."


def build_chat_instructions(listing_text: str) -> str:
    return CHAT_SYSTEM_PROMPT + truncate_listing(listing_text, CHAT_LISTING_CHAR_LIMIT)
