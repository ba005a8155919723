"""Utility helpers for test factories."""

from __future__ import annotations

from wordquiz.models.category_model import Category
from wordquiz.models.vocabulary_item_model import VocabularyItem


def create_item(db, original: str = "cat", translation: str = "кот", **kwargs) -> VocabularyItem:
    defaults = {
        "original": original,
        "translation": translation,
        "category": "General",
        "difficulty_level": 0,
        "correct_count": 0,
        "wrong_count": 0,
        "is_custom": False,
    }
    defaults.update(kwargs)
    item = VocabularyItem(**defaults)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def create_items_at_levels(db, levels) -> list[VocabularyItem]:
    return [
        create_item(db, original=f"word-{index}", translation=f"слово-{index}", difficulty_level=level)
        for index, level in enumerate(levels)
    ]


def create_category(db, name: str = "General", icon: str = "📚", color: str = "#95E1D3") -> Category:
    category = Category(name=name, icon=icon, color=color)
    db.add(category)
    db.commit()
    return category
