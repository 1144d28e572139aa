"""Shared test fixtures for the fitcoach test suite.

Stores live under tmp_path and the model is always a MagicMock, so no test
touches the network or the real data directory.
"""

from unittest.mock import MagicMock

import pytest

from fitcoach.agent.chat import UserContext
from fitcoach.agent.personalities import PersonalityProfile
from fitcoach.memory.profile import LifestyleSnapshot, ProfileStore
from fitcoach.memory.sessions import SessionStore


@pytest.fixture
def sessions(tmp_path):
    return SessionStore(sessions_dir=tmp_path / "sessions")


@pytest.fixture
def profiles(tmp_path):
    return ProfileStore(users_dir=tmp_path / "users")


@pytest.fixture
def generator():
    """Fake model that answers every request with the same text."""
    mock = MagicMock()
    mock.generate.return_value = "Sounds good! Let's keep moving."
    return mock


@pytest.fixture
def context(sessions):
    return UserContext(
        user_id="u1",
        session_key=sessions.start_session("u1"),
        personality=PersonalityProfile.GOAL_FINISHER,
        lifestyle=LifestyleSnapshot(steps=4200, exercise_minutes=25, sleep_hours=6.5),
        tenure_days=5,
    )
