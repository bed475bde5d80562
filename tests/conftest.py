"""Pytest fixtures for cutplan tests."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from cutplan.config import reload_settings
from cutplan.db import DatabaseConnection, set_db
from cutplan.tracking.models import Challenge
from cutplan.tracking.queries import ChallengeQueries


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a config file that does not exist (all defaults)."""
    monkeypatch.setenv("CUTPLAN_CONFIG", str(tmp_path / "config.yaml"))
    settings = reload_settings()
    yield settings
    reload_settings()


@pytest.fixture
def cli_db(temp_db, isolated_settings):
    """Install the temporary database as the global one used by the CLI."""
    set_db(temp_db)
    yield temp_db
    set_db(None)


@pytest.fixture
def sample_challenge(temp_db):
    """A 200 -> 183 lb challenge starting Monday 2024-01-01."""
    challenge = Challenge(
        challenge_id=None,
        start_date=date(2024, 1, 1),
        start_weight=200.0,
        goal_weight=183.0,
        target_calories=2000,
        fasting_type="16:8",
        eating_start_time="12:00",
        eating_end_time="20:00",
    )
    with temp_db.get_connection() as conn:
        challenge.challenge_id = ChallengeQueries.create(conn, challenge)
    return challenge
