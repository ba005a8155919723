"""Word selection and progress tracking for the multiple-choice quiz."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordquiz.core.config import settings
from wordquiz.crud import vocabulary_crud
from wordquiz.models.vocabulary_item_model import (
    LEARNED_THRESHOLD,
    MAX_DIFFICULTY_LEVEL,
    MIN_DIFFICULTY_LEVEL,
    VocabularyItem,
    clamp_difficulty,
)
from wordquiz.services.quiz_session import QuizSession
from wordquiz.services.results import ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class Question:
    target: VocabularyItem
    variants: List[VocabularyItem]

    @property
    def correct_index(self) -> int:
        # Matched by id: two items may share the same text.
        return next(index for index, item in enumerate(self.variants) if item.id == self.target.id)

    @property
    def distractors(self) -> List[VocabularyItem]:
        return [item for item in self.variants if item.id != self.target.id]

    def check_answer(self, selected_index: int) -> bool:
        return selected_index == self.correct_index


@dataclass
class Statistics:
    total_items: int = 0
    learned_count: int = 0
    in_progress_count: int = 0
    unseen_count: int = 0
    total_correct: int = 0
    total_wrong: int = 0

    @property
    def progress_percentage(self) -> float:
        if self.total_items == 0:
            return 0.0
        return self.learned_count / self.total_items * 100

    @property
    def overall_accuracy(self) -> float:
        answered = self.total_correct + self.total_wrong
        if answered == 0:
            return 0.0
        return self.total_correct / answered * 100


@dataclass
class AnswerOutcome:
    item: VocabularyItem
    was_correct: bool
    session: Optional[QuizSession] = field(default=None)


class QuizService:
    """Picks quiz prompts and applies answer outcomes to the dictionary.

    Candidates for the prompt are bucketed into tiers by difficulty level:
    unseen words (level 0), struggling words (level 1) and the rest of the
    words still being learned (levels 2 to 4). Fully learned words (level 5)
    are never prompted, but remain available as wrong answer options.

    Two strategies are supported:

    ``weighted``
        A tier is drawn from ``tier_weights`` (renormalised over the tiers
        that currently hold words), then a word is drawn uniformly inside it.

    ``priority``
        The lowest non-empty tier always wins, a word is drawn uniformly
        inside it.
    """

    TIER_LEVELS: Tuple[Tuple[int, ...], ...] = ((0,), (1,), (2, 3, 4))
    STRATEGIES = ("weighted", "priority")

    def __init__(
        self,
        db: Session,
        *,
        strategy: str | None = None,
        tier_weights: Sequence[float] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.strategy = (strategy or settings.QUIZ_SELECTION_STRATEGY).lower()
        if self.strategy not in self.STRATEGIES:
            raise ValueError(f"Unknown selection strategy: {self.strategy}")
        self.tier_weights = tuple(tier_weights or settings.QUIZ_TIER_WEIGHTS)
        if len(self.tier_weights) != len(self.TIER_LEVELS):
            raise ValueError("tier_weights needs one weight per tier")
        self.rng = rng or random.SystemRandom()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def get_next_question(self, distractor_count: int | None = None) -> ServiceResult[Optional[Question]]:
        """Return the next prompt.

        A successful result with a ``None`` value means the quiz is over: either
        every word is learned or the dictionary is too small to provide
        ``distractor_count`` wrong options. A distractor count below one is a
        failed result.
        """

        if distractor_count is None:
            distractor_count = settings.QUIZ_VARIANT_COUNT - 1
        if distractor_count < 1:
            return ServiceResult.fail("invalid_distractor_count", "At least one distractor is required")
        return ServiceResult.ok(self._build_question(distractor_count))

    def _build_question(self, distractor_count: int) -> Optional[Question]:
        target_id = self._pick_target_id()
        if target_id is None:
            logger.info("No quiz target left: every word is learned or the dictionary is empty.")
            return None

        pool = vocabulary_crud.list_item_ids(self.db, exclude_id=target_id)
        if len(pool) < distractor_count:
            logger.info(
                "Not enough words for a question (%s distractors wanted, %s available).",
                distractor_count,
                len(pool),
            )
            return None

        distractor_ids = self.rng.sample(pool, distractor_count)
        variant_ids = distractor_ids + [target_id]
        self.rng.shuffle(variant_ids)

        variants = vocabulary_crud.get_items_by_ids(self.db, variant_ids)
        if len(variants) != len(variant_ids):
            # A concurrent delete removed one of the drawn words.
            return None
        target = next(item for item in variants if item.id == target_id)
        return Question(target=target, variants=variants)

    def _pick_target_id(self) -> Optional[int]:
        tiers = [vocabulary_crud.list_ids_by_levels(self.db, levels) for levels in self.TIER_LEVELS]
        available = [(tier, weight) for tier, weight in zip(tiers, self.tier_weights) if tier]
        if not available:
            return None

        if self.strategy == "priority":
            chosen = available[0][0]
        else:
            weights = [weight for _, weight in available]
            if sum(weights) <= 0:
                # Only tiers with a zero weight hold words: fall back to them.
                weights = [1.0] * len(available)
            chosen = self.rng.choices([tier for tier, _ in available], weights=weights, k=1)[0]

        return self.rng.choice(chosen)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------
    def submit_answer(
        self,
        item_id: int,
        was_correct: bool,
        session: QuizSession | None = None,
    ) -> ServiceResult[AnswerOutcome]:
        """Move the word one level up or down and persist it straight away."""

        item = vocabulary_crud.get_item(self.db, item_id)
        if item is None:
            return ServiceResult.fail("item_not_found", f"No word with id {item_id}", status_code=404)

        if session is not None:
            session.record(was_correct)

        # Rows written outside the ORM may hold an out-of-range level.
        level = clamp_difficulty(item.difficulty_level or MIN_DIFFICULTY_LEVEL)
        if was_correct:
            item.difficulty_level = min(level + 1, MAX_DIFFICULTY_LEVEL)
            item.correct_count = (item.correct_count or 0) + 1
        else:
            item.difficulty_level = max(level - 1, MIN_DIFFICULTY_LEVEL)
            item.wrong_count = (item.wrong_count or 0) + 1
        item.last_reviewed_at = self._clock()

        try:
            self.db.add(item)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Could not save the answer for word %s: %s", item_id, exc)
            return ServiceResult.fail("persistence_failed", "The answer could not be saved", status_code=500)

        self.db.refresh(item)
        return ServiceResult.ok(AnswerOutcome(item=item, was_correct=was_correct, session=session))

    def answer_question(
        self,
        question: Question,
        selected_index: int,
        session: QuizSession | None = None,
    ) -> ServiceResult[AnswerOutcome]:
        return self.submit_answer(question.target.id, question.check_answer(selected_index), session)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def build_statistics(self) -> Statistics:
        buckets = vocabulary_crud.count_by_difficulty(self.db)
        total_correct, total_wrong = vocabulary_crud.sum_answer_counts(self.db)

        return Statistics(
            total_items=sum(buckets.values()),
            learned_count=sum(count for level, count in buckets.items() if level >= LEARNED_THRESHOLD),
            in_progress_count=sum(
                count for level, count in buckets.items() if MIN_DIFFICULTY_LEVEL < level < LEARNED_THRESHOLD
            ),
            unseen_count=buckets.get(MIN_DIFFICULTY_LEVEL, 0),
            total_correct=total_correct,
            total_wrong=total_wrong,
        )


__all__ = ["AnswerOutcome", "Question", "QuizService", "Statistics"]
