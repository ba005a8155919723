from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wordquiz.api.v2.dependencies import get_db, unwrap
from wordquiz.schemas.vocabulary_schema import (
    CategoryOut,
    VocabularyItemCreate,
    VocabularyItemOut,
    VocabularyItemUpdate,
)
from wordquiz.services.vocabulary_service import VocabularyService

router = APIRouter()
category_router = APIRouter()


@router.get("", response_model=List[VocabularyItemOut], summary="List dictionary words")
def list_words(
    search: Optional[str] = Query(default=None, max_length=255),
    category: Optional[str] = Query(default=None, max_length=100),
    difficulty: Optional[int] = Query(default=None),
    db: Session = Depends(get_db),
):
    items = unwrap(VocabularyService(db).list_items(search=search, category=category, difficulty=difficulty))
    return [VocabularyItemOut.model_validate(item) for item in items]


@router.post(
    "",
    response_model=VocabularyItemOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a custom word",
)
def add_word(payload: VocabularyItemCreate, db: Session = Depends(get_db)):
    item = unwrap(VocabularyService(db).add_item(payload.original, payload.translation, payload.category))
    return VocabularyItemOut.model_validate(item)


@router.get("/{item_id}", response_model=VocabularyItemOut)
def get_word(item_id: int, db: Session = Depends(get_db)):
    return VocabularyItemOut.model_validate(unwrap(VocabularyService(db).get_item(item_id)))


@router.patch("/{item_id}", response_model=VocabularyItemOut, summary="Edit a word")
def update_word(item_id: int, payload: VocabularyItemUpdate, db: Session = Depends(get_db)):
    item = unwrap(VocabularyService(db).update_item(item_id, **payload.model_dump(exclude_unset=True)))
    return VocabularyItemOut.model_validate(item)


@router.post("/{item_id}/reset", response_model=VocabularyItemOut, summary="Reset the learning progress of a word")
def reset_word_progress(item_id: int, db: Session = Depends(get_db)):
    return VocabularyItemOut.model_validate(unwrap(VocabularyService(db).reset_progress(item_id)))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a custom word")
def delete_word(item_id: int, db: Session = Depends(get_db)) -> None:
    unwrap(VocabularyService(db).delete_item(item_id))


@category_router.get("", response_model=List[CategoryOut], summary="List categories with word counts")
def list_categories(db: Session = Depends(get_db)):
    return [CategoryOut.model_validate(entry) for entry in unwrap(VocabularyService(db).list_categories())]
