"""
estate_match/analysis/features/contract_builder/contract_builder.py

Turns (listing text, PreferenceProfile) into the three artifacts the engine
consumes:

  1. instructions:  the mode-aware instruction profile (persona, grounding
                    rules, scoring rubric, mode focus).
  2. function_def:  a strict function definition whose parameters are the
                    AnalysisResult JSON Schema. The engine is forced to call
                    it, so the schema is enforced by the engine, not just
                    described in prose.
  3. prompt:        the user turn with the preferences and a length-capped
                    excerpt of the listing.

Pure construction; the only I/O is reading the packaged schema file.
"""

import json
import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, NamedTuple

from estate_match.analysis.features.preferences.preferences import PreferenceProfile, TransactionMode
from .prompts import (
    AUDITOR_PROMPT,
    MARKET_CONTEXT,
    SCORING_RUBRIC,
    MODE_FOCUS,
    TASK_PROMPT,
    FINAL_FUNCTION_NAME,
    FINAL_FUNCTION_DESCRIPTION,
)

SCHEMA_PATH = Path(__file__).parents[2] / "schemas" / "analysis_result.json"

# Hard character cutoffs applied to listing text before it reaches the engine
ANALYSIS_LISTING_CHAR_LIMIT = 30000
CHAT_LISTING_CHAR_LIMIT = 20000


class AnalysisContract(NamedTuple):
    instructions: str
    prompt: str
    function_def: Dict[str, Any]


def truncate_listing(listing_text: str, limit: int) -> str:
    """First `limit` characters of the listing, no sentence awareness."""
    return listing_text[:limit]


@lru_cache(maxsize=1)
def _read_schema(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def load_response_schema(path: Path = SCHEMA_PATH) -> Dict[str, Any]:
    """Fresh copy of the AnalysisResult JSON Schema."""
    return json.loads(_read_schema(path))


def build_instructions(mode: TransactionMode) -> str:
    """Instruction profile for one transaction mode; independent of any single request."""
    return "\n\n".join([
        AUDITOR_PROMPT,
        MARKET_CONTEXT,
        MODE_FOCUS[mode],
        SCORING_RUBRIC,
        TASK_PROMPT,
    ])


def build_function_def(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name":        FINAL_FUNCTION_NAME,
        "description": FINAL_FUNCTION_DESCRIPTION,
        "parameters":  copy.deepcopy(schema),
        "strict":      True,
    }


def build_user_prompt(listing_text: str, preferences: PreferenceProfile) -> str:
    """
    Deterministic user turn: preferences first, then the truncated listing.

    Only the label for the profile's own mode appears, so a rent budget is never
    presented as a purchase price or the other way round.
    """
    p = preferences
    excerpt = truncate_listing(listing_text, ANALYSIS_LISTING_CHAR_LIMIT)
    transaction = "Buying" if p.mode is TransactionMode.BUY else "Renting"
    return (
        "USER PREFERENCES:\n"
        f"- Transaction Mode: {p.mode.value} ({transaction})\n"
        f"- {p.budget_label}: {p.budget_display}\n"
        f"- Minimum: {p.min_bedrooms} Beds, {p.min_bathrooms:g} Baths\n"
        f"- Desired Location/Area: {p.location or 'Not specified'}\n"
        f"- Priority - Commute/Transit: {p.priorities.commute}/10\n"
        f"- Priority - Property Condition: {p.priorities.condition}/10\n"
        f"- Priority - Investment/Resale: {p.priorities.investment}/10\n"
        f"- Priority - Luxury Amenities: {p.priorities.amenities}/10\n"
        f"- SPECIFIC MUST-HAVES/NOTES: \"{p.custom_criteria}\"\n\n"
        "RAW LISTING TEXT:\n"
        f"{excerpt}"
    )


def build_contract(listing_text: str, preferences: PreferenceProfile) -> AnalysisContract:
    return AnalysisContract(
        instructions=build_instructions(preferences.mode),
        prompt=build_user_prompt(listing_text, preferences),
        function_def=build_function_def(load_response_schema()),
    )
