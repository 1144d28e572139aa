"""User profile creation and persistence.

One JSON file per user under data/users/. The profile holds the stored
personality, first-use timestamp (for tenure), coin balance and latest
lifestyle snapshot.
"""

import json
import os
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path

from fitcoach.agent.errors import PersistenceFailure
from fitcoach.agent.personalities import DEFAULT_PERSONALITY

DATA_DIR = Path(os.environ.get("FITCOACH_DATA_DIR", Path(__file__).parent.parent.parent / "data"))
USERS_DIR = DATA_DIR / "users"

SECONDS_PER_DAY = 60 * 60 * 24


@dataclass(frozen=True)
class LifestyleSnapshot:
    steps: float = 0
    exercise_minutes: float = 0
    sleep_hours: float = 7


# Lifestyle assigned to brand-new users until they report their own
STARTER_LIFESTYLE = LifestyleSnapshot(steps=4200, exercise_minutes=25, sleep_hours=6.5)


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class UserProfile:
    user_id: str
    personality: str
    first_used_at: str = field(default_factory=_now_iso)
    coins: int = 0
    lifestyle: LifestyleSnapshot = STARTER_LIFESTYLE
    last_updated: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        lifestyle = data.get("lifestyle") or {}
        return cls(
            user_id=data["user_id"],
            personality=data.get("personality") or DEFAULT_PERSONALITY.value,
            first_used_at=data.get("first_used_at") or _now_iso(),
            coins=int(data.get("coins", 0)),
            lifestyle=LifestyleSnapshot(
                steps=lifestyle.get("steps", 0),
                exercise_minutes=lifestyle.get("exercise_minutes", 0),
                sleep_hours=lifestyle.get("sleep_hours", 7),
            ),
            last_updated=data.get("last_updated") or _now_iso(),
        )


def tenure_days(first_used_at: str | datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since first use (floored, never negative)."""
    if isinstance(first_used_at, str):
        first_used_at = datetime.fromisoformat(first_used_at)
    now = now or datetime.now()
    elapsed = (now - first_used_at).total_seconds()
    return max(0, int(elapsed // SECONDS_PER_DAY))


def _safe_user_id(user_id: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_.-]", "_", user_id)
    # "." and ".." would escape the data directory
    return safe if safe.strip(".") else safe.replace(".", "_")


class ProfileStore:
    """JSON-file profile store.

    Usage:
        store = ProfileStore()
        profile = store.get_or_create("u-123", "goal_finisher")
        store.add_coins("u-123", 1)
    """

    def __init__(self, users_dir: str | Path | None = None):
        self.users_dir = Path(users_dir) if users_dir else USERS_DIR

    def _path(self, user_id: str) -> Path:
        return self.users_dir / f"{_safe_user_id(user_id)}.json"

    def load(self, user_id: str) -> UserProfile | None:
        """Load a profile, or None if the user has never been seen."""
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            return UserProfile.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, KeyError) as e:
            raise PersistenceFailure(f"Could not read profile for {user_id}: {e}") from e

    def save(self, profile: UserProfile) -> Path:
        path = self._path(profile.user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(profile.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(f"Could not write profile for {profile.user_id}: {e}") from e
        return path

    def get_or_create(self, user_id: str, personality: str) -> UserProfile:
        """Return the stored profile; create one with the starter lifestyle if absent.

        An existing profile keeps its original personality.
        """
        if not user_id or not personality:
            raise ValueError("user_id and personality are required")
        profile = self.load(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id, personality=personality)
            self.save(profile)
        return profile

    def _require(self, user_id: str) -> UserProfile:
        profile = self.load(user_id)
        if profile is None:
            raise FileNotFoundError(f"No profile found for user {user_id}")
        return profile

    def update_lifestyle(self, user_id: str, lifestyle: LifestyleSnapshot) -> UserProfile:
        profile = self._require(user_id)
        profile.lifestyle = lifestyle
        profile.last_updated = _now_iso()
        self.save(profile)
        return profile

    def update_personality(self, user_id: str, personality: str) -> UserProfile:
        profile = self._require(user_id)
        profile.personality = personality
        profile.last_updated = _now_iso()
        self.save(profile)
        return profile

    def add_coins(self, user_id: str, amount: int) -> int:
        """Credit coins and return the new balance. Zero is a no-op."""
        profile = self._require(user_id)
        if amount:
            profile.coins += amount
            self.save(profile)
        return profile.coins

    def coins(self, user_id: str) -> int:
        return self._require(user_id).coins

    def tenure_days(self, user_id: str, now: datetime | None = None) -> int:
        return tenure_days(self._require(user_id).first_used_at, now)

