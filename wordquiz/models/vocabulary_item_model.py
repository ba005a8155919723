from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, validates

from wordquiz.db.base_class import Base

MIN_DIFFICULTY_LEVEL = 0
MAX_DIFFICULTY_LEVEL = 5
LEARNED_THRESHOLD = 4
DEFAULT_CATEGORY = "General"


def clamp_difficulty(level: int) -> int:
    return max(MIN_DIFFICULTY_LEVEL, min(MAX_DIFFICULTY_LEVEL, int(level)))


class VocabularyItem(Base):
    __tablename__ = "vocabulary_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    original: Mapped[str] = mapped_column(String(255), nullable=False)  # English term
    translation: Mapped[str] = mapped_column(String(512), nullable=False)
    category: Mapped[str] = mapped_column(
        String(100), nullable=False, default=DEFAULT_CATEGORY, server_default=DEFAULT_CATEGORY, index=True
    )

    # Progress: 0 = unseen/hardest, 5 = fully learned
    difficulty_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0", index=True
    )
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    wrong_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    # Bounded on every write, admin forms included.
    @validates("difficulty_level")
    def _clamp_difficulty_level(self, key, value):
        if value is None:
            return value
        return clamp_difficulty(value)

    @validates("correct_count", "wrong_count")
    def _floor_counter(self, key, value):
        if value is None:
            return value
        return max(int(value), 0)

    @property
    def accuracy(self) -> float:
        """Share of correct answers as a percentage, 0 when never answered."""
        total = (self.correct_count or 0) + (self.wrong_count or 0)
        if total == 0:
            return 0.0
        return (self.correct_count or 0) / total * 100

    @property
    def is_learned(self) -> bool:
        return (self.difficulty_level or 0) >= LEARNED_THRESHOLD

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<VocabularyItem(id={self.id}, original='{self.original}', level={self.difficulty_level})>"
