"""
estate_match/analysis/features/result_validator/models.py

Typed view of the engine's analysis output. Wire keys are camelCase (as in
schemas/analysis_result.json); attributes are snake_case.

Enum-like fields tolerate values outside their documented set by mapping them
to an UNCLASSIFIED member instead of failing.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _Classified(str, Enum):
    @classmethod
    def _missing_(cls, value: Any) -> Any:
        return cls.UNCLASSIFIED  # type: ignore[attr-defined]


class Confidence(_Classified):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNCLASSIFIED = "Unclassified"


class Grade(_Classified):
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"
    UNCLASSIFIED = "Unclassified"


class ValueVerdict(_Classified):
    OVERPRICED = "Overpriced"
    FAIR_VALUE = "Fair Value"
    UNDERPRICED = "Underpriced/Steal"
    UNCLASSIFIED = "Unclassified"


# Lowest total that earns each grade, best first
GRADE_THRESHOLDS: List[Tuple[int, Grade]] = [
    (95, Grade.A_PLUS),
    (90, Grade.A),
    (80, Grade.B),
    (70, Grade.C),
    (60, Grade.D),
    (0, Grade.F),
]


def grade_for_score(total: int) -> Grade:
    """Letter grade for a 0-100 total on the published scale."""
    for floor, grade in GRADE_THRESHOLDS:
        if total >= floor:
            return grade
    return Grade.F


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EvidenceClaim(_WireModel):
    claim: str
    source_quote: Optional[str] = None
    confidence: Confidence

    @field_validator("confidence", mode="before")
    @classmethod
    def _classify_confidence(cls, v: Any) -> Any:
        return Confidence(v.strip()) if isinstance(v, str) else v


class Summary(_WireModel):
    title: str
    price: str
    location: str
    layout: str
    quick_summary: str


class CategoryScores(_WireModel):
    financial: int
    lifestyle: int
    condition: int


class MatchScore(_WireModel):
    total: int
    grade: Grade
    breakdown: str
    category_scores: CategoryScores

    @field_validator("grade", mode="before")
    @classmethod
    def _classify_grade(cls, v: Any) -> Any:
        return Grade(v.strip()) if isinstance(v, str) else v


class Details(_WireModel):
    pros: List[EvidenceClaim]
    cons: List[EvidenceClaim]
    red_flags: List[EvidenceClaim]
    hidden_gems: List[str]

    def claims(self) -> List[EvidenceClaim]:
        """Every quote-bearing claim: pros, then cons, then red flags."""
        return [*self.pros, *self.cons, *self.red_flags]


class MarketAnalysis(_WireModel):
    value_verdict: ValueVerdict
    investment_potential: str
    comparable_sales_notes: str

    @field_validator("value_verdict", mode="before")
    @classmethod
    def _classify_verdict(cls, v: Any) -> Any:
        return ValueVerdict(v.strip()) if isinstance(v, str) else v


class ContactDraft(_WireModel):
    subject: str
    body: str


class AnalysisResult(_WireModel):
    summary: Summary
    match_score: MatchScore
    details: Details
    market_analysis: MarketAnalysis
    contact_draft: ContactDraft

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize with the same camelCase keys the engine produced."""
        return self.model_dump_json(by_alias=True, indent=indent)
