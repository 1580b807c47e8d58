"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for lekhapal tests.
"""

import pytest

from lekhapal.config.settings import Settings
from lekhapal.schemas.domain import Table


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment (in-memory SQLite, fake API key)."""
    return Settings(
        _env_file=None,
        environment="development",
        database_url="sqlite+aiosqlite:///:memory:",
        gemini_api_key="test-key",
        gemini_base_url="https://gemini.test/v1beta",
        extraction_max_attempts=3,
        max_file_size_mb=1,
    )


@pytest.fixture
def members_table() -> Table:
    """A small rectangular members table."""
    return Table(
        title="DETAILS OF MEMBERS",
        columns=["S.NO.", "NAME", "SAVINGS"],
        rows=[["1", "Lalita", "100"], ["2", "Meena", "250"]],
    )


@pytest.fixture
def shg_profile_payload() -> dict:
    """Extraction output for an SHG profile page."""
    return {
        "shgProfile": {
            "shgName": "Jai Maa Durga SHG",
            "dateOfFormation": "12/03/2019",
            "villageName": "Rampur",
        },
        "members": [
            {"sNo": 1, "name": "Lalita", "dateOfJoining": "12/03/2019"},
            {"sNo": 2, "name": "Meena", "id": "M-02", "extra": "dropped"},
        ],
        "balanceDetails": {
            "cashInHand": 1200.0,
            "bankAccounts": ["SBI 1234", "PNB 9876"],
        },
    }
