# tests/utils.py
"""
Shared factories and fakes for the test suite. Nothing here touches the network.
"""

from __future__ import annotations

import copy
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

SAMPLE_LISTING = (
    "Charming 2 bedroom, 1 bathroom condo in Kitsilano, Vancouver. Asking $800,000.\n"
    "Strata fees $450/month include heat and hot water.\n"
    "Special assessment of $25,000 approved for 2025 envelope repairs.\n"
    "In-suite laundry. Steps to the beach and the 99 B-Line.\n"
    "Built 1998. Kitec plumbing replaced in 2019.\n"
)

RENTAL_LISTING = (
    "Bright 1 bed garden suite in East Vancouver. $2,300/month.\n"
    "Utilities not included. 12-month fixed lease. Damage deposit $1,150.\n"
    "No pets allowed. Shared laundry.\n"
)


def make_result_payload(**sections: Any) -> Dict[str, Any]:
    """A schema-valid engine response for SAMPLE_LISTING against a $750k / 3-bed profile."""
    payload: Dict[str, Any] = {
        "summary": {
            "title": "Kitsilano 2 Bed Condo",
            "price": "$800,000",
            "location": "Kitsilano, Vancouver",
            "layout": "2 Bed / 1 Bath, Not specified sqft",
            "quickSummary": "A well-located condo over budget with a large pending special assessment.",
        },
        "matchScore": {
            "total": 55,
            "grade": "F",
            "breakdown": (
                "Start 100. -20: asking $800,000 exceeds the $750,000 budget. "
                "-10: 2 bedrooms, one below the minimum of 3. "
                "-15: special assessment of $25,000. Total 55."
            ),
            "categoryScores": {"financial": 40, "lifestyle": 75, "condition": 60},
        },
        "details": {
            "pros": [
                {"claim": "Has in-suite laundry", "sourceQuote": "In-suite laundry", "confidence": "High"},
            ],
            "cons": [
                {"claim": "Monthly strata fees", "sourceQuote": "Strata fees $450/month", "confidence": "High"},
            ],
            "redFlags": [
                {
                    "claim": "Large special assessment pending",
                    "sourceQuote": "Special assessment of $25,000 approved for 2025 envelope repairs",
                    "confidence": "High",
                },
            ],
            "hiddenGems": ["Strata fees include heat and hot water"],
        },
        "marketAnalysis": {
            "valueVerdict": "Overpriced",
            "investmentPotential": "Moderate; the assessment eats into short-term returns.",
            "comparableSalesNotes": "Not specified",
        },
        "contactDraft": {
            "subject": "Questions about the Kitsilano condo",
            "body": "Hello, could you share the square footage and the special assessment schedule?",
        },
    }
    for key, value in sections.items():
        payload[key] = value
    return copy.deepcopy(payload)


def make_result_json(**sections: Any) -> str:
    return json.dumps(make_result_payload(**sections))


# -------- Engine-level fakes (stand in for EngineClient) --------

class FakeChatSession:
    def __init__(self, instructions: str, replies: List[Any]):
        self.instructions = instructions
        self.replies = replies
        self.sent: List[str] = []

    def send(self, text: str) -> str:
        self.sent.append(text)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeEngine:
    """Records every call; returns canned analysis output and chat replies."""

    def __init__(
        self,
        response: Optional[str] = None,
        error: Optional[Exception] = None,
        chat_replies: Optional[List[Any]] = None,
    ):
        self.response = response if response is not None else make_result_json()
        self.error = error
        self.chat_replies = list(chat_replies or [])
        self.calls: List[Dict[str, Any]] = []
        self.sessions: List[FakeChatSession] = []

    def generate_structured(self, instructions: str, prompt: str, function_def: Dict[str, Any]) -> str:
        self.calls.append({
            "instructions": instructions,
            "prompt": prompt,
            "function_def": function_def,
        })
        if self.error is not None:
            raise self.error
        return self.response

    def start_chat(self, instructions: str) -> FakeChatSession:
        session = FakeChatSession(instructions, self.chat_replies)
        self.sessions.append(session)
        return session


# -------- SDK-level fakes (stand in for openai.OpenAI) --------

def make_completion(content: Optional[str] = None, arguments: Optional[str] = None) -> SimpleNamespace:
    tool_calls = None
    if arguments is not None:
        tool_calls = [SimpleNamespace(
            type="function",
            function=SimpleNamespace(name="submit_listing_analysis", arguments=arguments),
        )]
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeCompletions:
    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        # snapshot messages; the caller keeps mutating its list
        self.calls.append({**kwargs, "messages": [dict(m) for m in kwargs.get("messages", [])]})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_openai_client(*responses: Any) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(list(responses))))
