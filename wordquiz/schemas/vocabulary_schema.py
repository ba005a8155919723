from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VocabularyItemCreate(BaseModel):
    original: str = Field(..., max_length=255)
    translation: str = Field(..., max_length=512)
    category: Optional[str] = Field(default=None, max_length=100)


class VocabularyItemUpdate(BaseModel):
    original: Optional[str] = Field(default=None, max_length=255)
    translation: Optional[str] = Field(default=None, max_length=512)
    category: Optional[str] = Field(default=None, max_length=100)
    difficulty_level: Optional[int] = None


class VocabularyItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    original: str
    translation: str
    category: str
    difficulty_level: int
    correct_count: int
    wrong_count: int
    last_reviewed_at: Optional[datetime] = None
    is_custom: bool
    created_at: Optional[datetime] = None
    accuracy: float
    is_learned: bool


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    icon: str
    color: str
    word_count: int = 0
