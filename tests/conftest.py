# tests/conftest.py
from __future__ import annotations

import pytest

from estate_match.analysis.features.preferences.preferences import (
    PreferenceProfile,
    Priorities,
    TransactionMode,
)
from tests.utils import RENTAL_LISTING, SAMPLE_LISTING, FakeEngine


@pytest.fixture(autouse=True)
def _no_real_credentials(monkeypatch, tmp_path):
    """Keep developer .env files and shell variables out of the tests."""
    monkeypatch.setattr("estate_match.engine.engine_client.ENV_PATH", tmp_path / ".env")
    for var in ("OPENAI_API_KEY", "ESTATE_MATCH_MODEL", "ESTATE_MATCH_TEMPERATURE"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def sample_listing():
    return SAMPLE_LISTING


@pytest.fixture
def rental_listing():
    return RENTAL_LISTING


@pytest.fixture
def buy_preferences():
    return PreferenceProfile(
        mode=TransactionMode.BUY,
        budget_max=750000,
        min_bedrooms=3,
        min_bathrooms=1,
        location="Kitsilano",
        priorities=Priorities(commute=8, condition=6, investment=4, amenities=2),
        custom_criteria="Must have in-suite laundry",
    )


@pytest.fixture
def rent_preferences():
    return PreferenceProfile(
        mode=TransactionMode.RENT,
        budget_max=2500,
        min_bedrooms=1,
        min_bathrooms=1,
        location="East Vancouver",
        custom_criteria="Must allow a large dog",
    )


@pytest.fixture
def fake_engine():
    """Factory for a FakeEngine with canned output."""

    def _factory(**kwargs):
        return FakeEngine(**kwargs)

    return _factory
