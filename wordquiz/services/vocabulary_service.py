from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordquiz.crud import category_crud, vocabulary_crud
from wordquiz.models.vocabulary_item_model import (
    DEFAULT_CATEGORY,
    MAX_DIFFICULTY_LEVEL,
    MIN_DIFFICULTY_LEVEL,
    VocabularyItem,
)
from wordquiz.services.results import ServiceResult, VocabularyError

logger = logging.getLogger(__name__)


@dataclass
class CategorySummary:
    name: str
    icon: str
    color: str
    word_count: int = 0


class VocabularyService:
    """Dictionary management behind the dictionary screen."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_items(
        self,
        search: str | None = None,
        category: str | None = None,
        difficulty: int | None = None,
    ) -> ServiceResult[List[VocabularyItem]]:
        if difficulty is not None and not MIN_DIFFICULTY_LEVEL <= difficulty <= MAX_DIFFICULTY_LEVEL:
            return ServiceResult.fail("invalid_difficulty", "Difficulty must be between 0 and 5")
        items = vocabulary_crud.list_items(self.db, search=search, category=category, difficulty=difficulty)
        return ServiceResult.ok(items)

    def get_item(self, item_id: int) -> ServiceResult[VocabularyItem]:
        try:
            return ServiceResult.ok(self._require_item(item_id))
        except VocabularyError as exc:
            return ServiceResult.from_error(exc)

    def list_categories(self) -> ServiceResult[List[CategorySummary]]:
        counts = vocabulary_crud.count_by_category(self.db)
        summaries = [
            CategorySummary(
                name=category.name,
                icon=category.icon,
                color=category.color,
                word_count=counts.get(category.name, 0),
            )
            for category in category_crud.list_categories(self.db)
        ]
        return ServiceResult.ok(summaries)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_item(self, original: str, translation: str, category: str | None = None) -> ServiceResult[VocabularyItem]:
        try:
            original, translation, category = self._clean_fields(original, translation, category)
            item = vocabulary_crud.create_item(
                self.db,
                original=original,
                translation=translation,
                category=category,
                is_custom=True,
            )
        except VocabularyError as exc:
            return ServiceResult.from_error(exc)
        except SQLAlchemyError as exc:
            return self._persistence_failure("add", exc)
        logger.info("Added word %s (%s).", item.id, item.original)
        return ServiceResult.ok(item)

    def update_item(
        self,
        item_id: int,
        *,
        original: Optional[str] = None,
        translation: Optional[str] = None,
        category: Optional[str] = None,
        difficulty_level: Optional[int] = None,
    ) -> ServiceResult[VocabularyItem]:
        try:
            item = self._require_item(item_id)
            if original is not None:
                original = original.strip()
                if not original:
                    raise VocabularyError("blank_original", message="The word cannot be blank")
            if translation is not None:
                translation = translation.strip()
                if not translation:
                    raise VocabularyError("blank_translation", message="The translation cannot be blank")
            if category is not None:
                category = category.strip() or DEFAULT_CATEGORY
            item = vocabulary_crud.update_item(
                self.db,
                item,
                original=original,
                translation=translation,
                category=category,
                difficulty_level=difficulty_level,
            )
        except VocabularyError as exc:
            return ServiceResult.from_error(exc)
        except SQLAlchemyError as exc:
            return self._persistence_failure("update", exc)
        return ServiceResult.ok(item)

    def reset_progress(self, item_id: int) -> ServiceResult[VocabularyItem]:
        try:
            item = vocabulary_crud.reset_progress(self.db, self._require_item(item_id))
        except VocabularyError as exc:
            return ServiceResult.from_error(exc)
        except SQLAlchemyError as exc:
            return self._persistence_failure("reset", exc)
        return ServiceResult.ok(item)

    def delete_item(self, item_id: int) -> ServiceResult[int]:
        """Delete a user word. Bundled words cannot be deleted."""
        try:
            item = self._require_item(item_id)
            if not item.is_custom:
                raise VocabularyError(
                    "not_deletable",
                    status_code=403,
                    message="Only words you added or imported can be deleted",
                )
            vocabulary_crud.delete_item(self.db, item)
        except VocabularyError as exc:
            return ServiceResult.from_error(exc)
        except SQLAlchemyError as exc:
            return self._persistence_failure("delete", exc)
        logger.info("Deleted word %s.", item_id)
        return ServiceResult.ok(item_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_item(self, item_id: int) -> VocabularyItem:
        item = vocabulary_crud.get_item(self.db, item_id)
        if item is None:
            raise VocabularyError("item_not_found", status_code=404, message=f"No word with id {item_id}")
        return item

    def _clean_fields(self, original: str, translation: str, category: str | None) -> tuple[str, str, str]:
        original = (original or "").strip()
        translation = (translation or "").strip()
        if not original:
            raise VocabularyError("blank_original", message="The word cannot be blank")
        if not translation:
            raise VocabularyError("blank_translation", message="The translation cannot be blank")
        return original, translation, (category or "").strip() or DEFAULT_CATEGORY

    def _persistence_failure(self, action: str, exc: SQLAlchemyError) -> ServiceResult:
        self.db.rollback()
        logger.error("Could not %s the word: %s", action, exc)
        return ServiceResult.fail("persistence_failed", f"Could not {action} the word", status_code=500)


__all__ = ["CategorySummary", "VocabularyService"]
