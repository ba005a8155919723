"""Declares every SQLAlchemy model so ``Base.metadata`` sees all tables."""

from wordquiz.db.base_class import Base

from wordquiz.models.category_model import Category
from wordquiz.models.vocabulary_item_model import VocabularyItem

__all__ = (
    "Base",
    "Category",
    "VocabularyItem",
)
