"""
estate_match/analysis/features/preferences/preferences.py

The user's preference profile: what a listing is scored against.

The same `budget_max` slot holds a purchase price in Buy mode and a monthly
rent in Rent mode; `budget_label` is the only place that interpretation is
spelled out.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from estate_match.errors import InputError


class TransactionMode(str, Enum):
    BUY = "Buy"
    RENT = "Rent"


# Budget used when the caller does not give one, per mode
DEFAULT_BUDGETS: Dict[TransactionMode, float] = {
    TransactionMode.BUY: 750000,
    TransactionMode.RENT: 2500,
}

BUDGET_LABELS: Dict[TransactionMode, str] = {
    TransactionMode.BUY: "Max Purchase Price",
    TransactionMode.RENT: "Max Monthly Rent",
}


def _reject_bool(v: Any) -> Any:
    # bool is an int subclass; True must not read as 1
    if isinstance(v, bool):
        raise ValueError("expected a number, not a boolean")
    return v


class Priorities(BaseModel):
    """Relative importance of each axis, 1 (don't care) to 10 (critical)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    commute: int = Field(default=5, ge=1, le=10)
    condition: int = Field(default=5, ge=1, le=10)
    investment: int = Field(default=5, ge=1, le=10)
    amenities: int = Field(default=5, ge=1, le=10)

    @field_validator("commute", "condition", "investment", "amenities", mode="before")
    @classmethod
    def _no_bools(cls, v: Any) -> Any:
        return _reject_bool(v)


class PreferenceProfile(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    mode: TransactionMode = TransactionMode.BUY
    budget_max: float = Field(gt=0, allow_inf_nan=False)
    min_bedrooms: int = Field(default=2, ge=0)
    min_bathrooms: float = Field(default=1, ge=0, multiple_of=0.5)
    location: str = ""
    priorities: Priorities = Field(default_factory=Priorities)
    custom_criteria: str = ""

    @field_validator("budget_max", "min_bedrooms", "min_bathrooms", mode="before")
    @classmethod
    def _no_bools(cls, v: Any) -> Any:
        return _reject_bool(v)

    @model_validator(mode="before")
    @classmethod
    def _default_budget_for_mode(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("budget_max") is None and data.get("budgetMax") is None:
            try:
                mode = TransactionMode(data.get("mode", TransactionMode.BUY))
            except ValueError:
                # let field validation report the bad mode
                return data
            data = {k: v for k, v in data.items() if k not in ("budget_max", "budgetMax")}
            data["budget_max"] = DEFAULT_BUDGETS[mode]
        return data

    @classmethod
    def defaults(cls, mode: TransactionMode = TransactionMode.BUY) -> "PreferenceProfile":
        return cls(mode=mode)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreferenceProfile":
        """
        Build a profile from loosely typed input (a parsed JSON file, form data).

        Raises:
            InputError: If any field is missing, mistyped or out of range.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InputError(f"Invalid preferences: {e}") from e

    @property
    def budget_label(self) -> str:
        return BUDGET_LABELS[self.mode]

    @property
    def budget_display(self) -> str:
        """Budget as shown to the engine, e.g. "$750,000 CAD" or "$2,500 CAD/month"."""
        if float(self.budget_max).is_integer():
            amount = f"${self.budget_max:,.0f} CAD"
        else:
            amount = f"${self.budget_max:,.2f} CAD"
        if self.mode is TransactionMode.RENT:
            return f"{amount}/month"
        return amount
