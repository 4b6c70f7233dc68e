"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation of review defaults from the developer's environment
- Shared feedback samples
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

REPO_ROOT = Path(__file__).parent

_REVIEW_ENV_VARS = (
    "REVIEW_DEFAULT_SPECIALIST",
    "REVIEW_DEFAULT_STAGE",
    "LOG_LEVEL",
    "MCP_HOST",
    "MCP_PORT",
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_review_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against built-in defaults, not values from .env."""
    for name in _REVIEW_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def repo_root() -> Path:
    """Repository root, for tests that invoke the CLI."""
    return REPO_ROOT


@pytest.fixture
def reviewer_feedback() -> str:
    """Typical free-text output of a reviewer stage."""
    return (
        "1. Vermeld de bron van het forfaitaire rendement\n"
        "Sectie: Berekening\n"
        "Reden: Zonder bron is de berekening niet controleerbaar\n"
        "\n"
        "KRITIEK: Het heffingsvrij vermogen voor 2023 is onjuist\n"
        "Oud: € 50.650 → Nieuw: € 57.000\n"
        "\n"
        "Toevoegen: Paragraaf over de tegenbewijsregeling\n"
    )
