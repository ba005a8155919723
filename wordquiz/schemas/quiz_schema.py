from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wordquiz.schemas.vocabulary_schema import VocabularyItemOut


class QuestionVariantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    translation: str


class QuestionOut(BaseModel):
    item_id: int
    original: str
    category: str
    variants: List[QuestionVariantOut]
    correct_index: int


class NextQuestionOut(BaseModel):
    completed: bool = False
    question: Optional[QuestionOut] = None


class AnswerIn(BaseModel):
    item_id: int = Field(..., ge=1)
    selected_item_id: Optional[int] = None
    was_correct: Optional[bool] = None
    session_id: Optional[str] = None

    @model_validator(mode="after")
    def _ensure_outcome(self) -> "AnswerIn":
        if self.selected_item_id is None and self.was_correct is None:
            raise ValueError("selected_item_id or was_correct is required")
        return self

    def resolve_correctness(self) -> bool:
        if self.was_correct is not None:
            return self.was_correct
        return self.selected_item_id == self.item_id


class QuizSessionOut(BaseModel):
    session_id: str
    questions_answered: int
    correct_answers: int
    wrong_answers: int
    accuracy: float
    progress_text: str


class AnswerOut(BaseModel):
    was_correct: bool
    item: VocabularyItemOut
    session: Optional[QuizSessionOut] = None


class StatisticsOut(BaseModel):
    total_items: int
    learned_count: int
    in_progress_count: int
    unseen_count: int
    total_correct: int
    total_wrong: int
    progress_percentage: float
    overall_accuracy: float
