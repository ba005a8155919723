from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from wordquiz.models.vocabulary_item_model import (
    DEFAULT_CATEGORY,
    MAX_DIFFICULTY_LEVEL,
    VocabularyItem,
    clamp_difficulty,
)


# ==============================================================================
# READ
# ==============================================================================

def get_item(db: Session, item_id: int) -> Optional[VocabularyItem]:
    return db.get(VocabularyItem, item_id)


def get_items_by_ids(db: Session, item_ids: Sequence[int]) -> List[VocabularyItem]:
    """Return the items for *item_ids*, in the order the ids were given."""
    if not item_ids:
        return []
    rows = db.query(VocabularyItem).filter(VocabularyItem.id.in_(list(item_ids))).all()
    by_id = {row.id: row for row in rows}
    return [by_id[item_id] for item_id in item_ids if item_id in by_id]


def list_items(
    db: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    difficulty: Optional[int] = None,
) -> List[VocabularyItem]:
    query = db.query(VocabularyItem)

    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(VocabularyItem.original).like(pattern),
                func.lower(VocabularyItem.translation).like(pattern),
            )
        )
    if category is not None:
        query = query.filter(VocabularyItem.category == category)
    if difficulty is not None:
        query = query.filter(VocabularyItem.difficulty_level == difficulty)

    return query.order_by(VocabularyItem.original.asc(), VocabularyItem.id.asc()).all()


def count_items(db: Session) -> int:
    return db.query(func.count(VocabularyItem.id)).scalar() or 0


def list_item_ids(db: Session, *, exclude_id: Optional[int] = None) -> List[int]:
    query = db.query(VocabularyItem.id)
    if exclude_id is not None:
        query = query.filter(VocabularyItem.id != exclude_id)
    return [row.id for row in query.order_by(VocabularyItem.id.asc()).all()]


def list_ids_by_levels(db: Session, levels: Iterable[int]) -> List[int]:
    """Ids of items whose difficulty level is one of *levels*.

    Items at the maximum level are never returned, whatever *levels* holds:
    a fully learned word is not quizzed again.
    """
    wanted = [level for level in levels if level < MAX_DIFFICULTY_LEVEL]
    if not wanted:
        return []
    rows = (
        db.query(VocabularyItem.id)
        .filter(VocabularyItem.difficulty_level.in_(wanted))
        .order_by(VocabularyItem.id.asc())
        .all()
    )
    return [row.id for row in rows]


def count_by_difficulty(db: Session) -> Dict[int, int]:
    rows = (
        db.query(VocabularyItem.difficulty_level, func.count(VocabularyItem.id))
        .group_by(VocabularyItem.difficulty_level)
        .all()
    )
    return {int(level): int(count) for level, count in rows}


def sum_answer_counts(db: Session) -> tuple[int, int]:
    correct, wrong = db.query(
        func.coalesce(func.sum(VocabularyItem.correct_count), 0),
        func.coalesce(func.sum(VocabularyItem.wrong_count), 0),
    ).one()
    return int(correct or 0), int(wrong or 0)


def count_by_category(db: Session) -> Dict[str, int]:
    rows = (
        db.query(VocabularyItem.category, func.count(VocabularyItem.id))
        .group_by(VocabularyItem.category)
        .all()
    )
    return {category: int(count) for category, count in rows}


def find_by_normalized_key(db: Session, category: str, original: str) -> Optional[VocabularyItem]:
    """Find an item by its reconciliation key.

    The key is the trimmed, case-insensitive ``(category, original)`` pair.
    SQLite only lowercases ASCII, so candidates are narrowed by length in SQL
    and the comparison itself happens here with ``str.lower``.
    """
    stripped_original = (original or "").strip()
    wanted_original = stripped_original.lower()
    wanted_category = (category or "").strip().lower()
    candidates = (
        db.query(VocabularyItem)
        .filter(func.length(func.trim(VocabularyItem.original)) == len(stripped_original))
        .order_by(VocabularyItem.id.asc())
    )
    for item in candidates:
        if (
            (item.original or "").strip().lower() == wanted_original
            and (item.category or "").strip().lower() == wanted_category
        ):
            return item
    return None


# ==============================================================================
# WRITE
# ==============================================================================

def create_item(
    db: Session,
    *,
    original: str,
    translation: str,
    category: str = DEFAULT_CATEGORY,
    is_custom: bool = True,
    commit: bool = True,
) -> VocabularyItem:
    item = VocabularyItem(
        original=original,
        translation=translation,
        category=category or DEFAULT_CATEGORY,
        difficulty_level=0,
        correct_count=0,
        wrong_count=0,
        last_reviewed_at=None,
        is_custom=is_custom,
    )
    db.add(item)
    if commit:
        db.commit()
        db.refresh(item)
    else:
        db.flush([item])
    return item


def update_item(
    db: Session,
    item: VocabularyItem,
    *,
    original: Optional[str] = None,
    translation: Optional[str] = None,
    category: Optional[str] = None,
    difficulty_level: Optional[int] = None,
    commit: bool = True,
) -> VocabularyItem:
    if original is not None:
        item.original = original
    if translation is not None:
        item.translation = translation
    if category is not None:
        item.category = category
    if difficulty_level is not None:
        item.difficulty_level = clamp_difficulty(difficulty_level)

    db.add(item)
    if commit:
        db.commit()
        db.refresh(item)
    else:
        db.flush([item])
    return item


def reset_progress(db: Session, item: VocabularyItem) -> VocabularyItem:
    item.difficulty_level = 0
    item.correct_count = 0
    item.wrong_count = 0
    item.last_reviewed_at = None
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item: VocabularyItem) -> None:
    db.delete(item)
    db.commit()


def bulk_insert(db: Session, rows: Iterable[dict], *, is_custom: bool = False) -> int:
    items = [
        VocabularyItem(
            original=row["original"],
            translation=row["translation"],
            category=row.get("category") or DEFAULT_CATEGORY,
            is_custom=is_custom,
        )
        for row in rows
    ]
    db.add_all(items)
    db.commit()
    return len(items)
