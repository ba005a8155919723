"""In-memory quiz session counters.

Session counters live next to, never inside, the persisted per-item
counters: a failed write on an item must not change what the learner sees
at the end of the session.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass
class QuizSession:
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    questions_answered: int = 0
    correct_answers: int = 0

    @property
    def wrong_answers(self) -> int:
        return self.questions_answered - self.correct_answers

    @property
    def accuracy(self) -> float:
        if self.questions_answered == 0:
            return 0.0
        return self.correct_answers / self.questions_answered * 100

    @property
    def progress_text(self) -> str:
        return f"{self.correct_answers}/{self.questions_answered}"

    def record(self, was_correct: bool) -> None:
        self.questions_answered += 1
        if was_correct:
            self.correct_answers += 1

    def reset(self) -> None:
        self.questions_answered = 0
        self.correct_answers = 0
        self.started_at = datetime.now(timezone.utc)


class QuizSessionStore:
    """Thread-safe registry of live sessions, keyed by session id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, QuizSession] = {}
        self._lock = threading.Lock()

    def create(self) -> QuizSession:
        session = QuizSession()
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str | None) -> Optional[QuizSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)


session_store = QuizSessionStore()

__all__ = ["QuizSession", "QuizSessionStore", "session_store"]
