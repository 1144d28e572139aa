"""Conversation session storage (JSONL, append-only).

Each user has a directory of session files; each line is one
ConversationTurn. Turns are never rewritten once appended.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from fitcoach.agent.errors import PersistenceFailure
from fitcoach.memory.profile import DATA_DIR, _safe_user_id

logger = logging.getLogger(__name__)

SESSIONS_DIR = Path(os.environ.get("FITCOACH_SESSIONS_DIR", DATA_DIR / "sessions"))

PREVIEW_CHARS = 60
ROLES = ("user", "assistant")

_SESSION_ID_RE = re.compile(r"session_[\w-]+")


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass(frozen=True)
class ConversationTurn:
    role: str          # "user" or "assistant"
    content: str
    timestamp: str = field(default_factory=_now_iso)

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Invalid turn role: {self.role!r}")

    def to_dict(self) -> dict:
        return {"ts": self.timestamp, "role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, entry: dict) -> "ConversationTurn":
        return cls(
            role=entry.get("role", "user"),
            content=entry.get("content", ""),
            timestamp=entry.get("ts") or _now_iso(),
        )


@dataclass
class SessionSummary:
    session_key: str
    preview: str
    turn_count: int
    created_at: str
    updated_at: str


class SessionStore:
    """File-backed conversation store.

    Session keys look like "<user_id>/session_2026-10-19_101500".

    Usage:
        store = SessionStore()
        key = store.current_session("u-123")
        store.append_turns(key, [ConversationTurn("user", "hi")])
        recent = store.load_recent_turns(key, limit=10)
    """

    def __init__(self, sessions_dir: str | Path | None = None):
        self.sessions_dir = Path(sessions_dir) if sessions_dir else SESSIONS_DIR

    def _user_dir(self, user_id: str) -> Path:
        return self.sessions_dir / _safe_user_id(user_id)

    def _path(self, session_key: str) -> Path:
        user_part, _, session_id = session_key.partition("/")
        if (
            not user_part
            or user_part != _safe_user_id(user_part)
            or not _SESSION_ID_RE.fullmatch(session_id)
        ):
            raise ValueError(f"Malformed session key: {session_key!r}")
        return self._user_dir(user_part) / f"{session_id}.jsonl"

    # -- Session lifecycle ---------------------------------------------------

    def start_session(self, user_id: str) -> str:
        """Create a new empty session and return its key."""
        user_dir = self._user_dir(user_id)
        session_id = datetime.now().strftime("session_%Y-%m-%d_%H%M%S")
        path = user_dir / f"{session_id}.jsonl"
        suffix = 1
        while path.exists():
            suffix += 1
            path = user_dir / f"{session_id}_{suffix}.jsonl"
        try:
            user_dir.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as e:
            raise PersistenceFailure(f"Could not create session for {user_id}: {e}") from e
        return f"{_safe_user_id(user_id)}/{path.stem}"

    def _session_files(self, user_id: str) -> list[Path]:
        user_dir = self._user_dir(user_id)
        if not user_dir.exists():
            return []
        return sorted(user_dir.glob("session_*.jsonl"), key=lambda p: (p.stat().st_mtime, p.name))

    def current_session(self, user_id: str) -> str:
        """Latest session for the user, or a fresh one if none exists."""
        files = self._session_files(user_id)
        if files:
            return f"{_safe_user_id(user_id)}/{files[-1].stem}"
        return self.start_session(user_id)

    def resolve_session(self, user_id: str, session_key: str) -> str:
        """Validate that an existing session belongs to the user and return its key.

        Raises ValueError for malformed keys, other users' sessions and
        sessions that do not exist.
        """
        key = session_key.strip()
        path = self._path(key)
        if key.partition("/")[0] != _safe_user_id(user_id):
            raise ValueError(f"Session {key!r} does not belong to {user_id}")
        if not path.exists():
            raise ValueError(f"No such session: {key!r}")
        return key

    # -- Reading / writing ----------------------------------------------------

    def load_session(self, session_key: str) -> list[ConversationTurn]:
        """All turns of a session in append order. Corrupt lines are skipped."""
        path = self._path(session_key)
        if not path.exists():
            return []
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise PersistenceFailure(f"Could not read session {session_key}: {e}") from e

        turns = []
        for line in lines:
            if not line.strip():
                continue
            try:
                turns.append(ConversationTurn.from_dict(json.loads(line)))
            except (json.JSONDecodeError, ValueError):
                logger.warning("Skipping corrupt line in session %s", session_key)
        return turns

    def load_recent_turns(self, session_key: str, limit: int = 10) -> list[ConversationTurn]:
        turns = self.load_session(session_key)
        return turns[-limit:] if limit > 0 else []

    def append_turns(self, session_key: str, turns: list[ConversationTurn]) -> None:
        path = self._path(session_key)
        payload = "".join(json.dumps(t.to_dict(), ensure_ascii=False) + "\n" for t in turns)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise PersistenceFailure(f"Could not append to session {session_key}: {e}") from e

    # -- History ---------------------------------------------------------------

    def list_sessions(self, user_id: str, limit: int = 10) -> list[SessionSummary]:
        """Most recent sessions first, each with a preview of its first user message."""
        summaries = []
        for path in reversed(self._session_files(user_id)):
            key = f"{_safe_user_id(user_id)}/{path.stem}"
            turns = self.load_session(key)
            if not turns:
                continue
            summaries.append(SessionSummary(
                session_key=key,
                preview=_preview(turns),
                turn_count=len(turns),
                created_at=turns[0].timestamp,
                updated_at=turns[-1].timestamp,
            ))
            if len(summaries) >= limit:
                break
        return summaries


def _preview(turns: list[ConversationTurn]) -> str:
    first_user = next((t for t in turns if t.role == "user"), None)
    if first_user is None:
        return "New conversation"
    text = first_user.content
    if len(text) > PREVIEW_CHARS:
        return text[:PREVIEW_CHARS] + "..."
    return text
