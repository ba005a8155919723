from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from wordquiz.api.v2.dependencies import get_db, resolve_quiz_session, unwrap
from wordquiz.schemas.quiz_schema import (
    AnswerIn,
    AnswerOut,
    NextQuestionOut,
    QuestionOut,
    QuestionVariantOut,
    QuizSessionOut,
    StatisticsOut,
)
from wordquiz.schemas.vocabulary_schema import VocabularyItemOut
from wordquiz.services.quiz_service import Question, QuizService, Statistics
from wordquiz.services.quiz_session import QuizSession, session_store

router = APIRouter()


def _session_payload(session: Optional[QuizSession]) -> Optional[QuizSessionOut]:
    if session is None:
        return None
    return QuizSessionOut(
        session_id=session.session_id,
        questions_answered=session.questions_answered,
        correct_answers=session.correct_answers,
        wrong_answers=session.wrong_answers,
        accuracy=round(session.accuracy, 2),
        progress_text=session.progress_text,
    )


def _question_payload(question: Question) -> QuestionOut:
    return QuestionOut(
        item_id=question.target.id,
        original=question.target.original,
        category=question.target.category,
        variants=[QuestionVariantOut.model_validate(item) for item in question.variants],
        correct_index=question.correct_index,
    )


def _statistics_payload(stats: Statistics) -> StatisticsOut:
    return StatisticsOut(
        total_items=stats.total_items,
        learned_count=stats.learned_count,
        in_progress_count=stats.in_progress_count,
        unseen_count=stats.unseen_count,
        total_correct=stats.total_correct,
        total_wrong=stats.total_wrong,
        progress_percentage=round(stats.progress_percentage, 2),
        overall_accuracy=round(stats.overall_accuracy, 2),
    )


@router.get("/next", response_model=NextQuestionOut, summary="Next quiz question")
def get_next_question(
    distractors: Optional[int] = Query(default=None, ge=1, le=20),
    db: Session = Depends(get_db),
) -> NextQuestionOut:
    question = unwrap(QuizService(db).get_next_question(distractors))
    if question is None:
        return NextQuestionOut(completed=True)
    return NextQuestionOut(question=_question_payload(question))


@router.post("/answer", response_model=AnswerOut, summary="Submit an answer and update the word progress")
def submit_answer(payload: AnswerIn, db: Session = Depends(get_db)) -> AnswerOut:
    session = resolve_quiz_session(payload.session_id)
    outcome = unwrap(QuizService(db).submit_answer(payload.item_id, payload.resolve_correctness(), session))
    return AnswerOut(
        was_correct=outcome.was_correct,
        item=VocabularyItemOut.model_validate(outcome.item),
        session=_session_payload(session),
    )


@router.get("/statistics", response_model=StatisticsOut, summary="Learning statistics")
def get_statistics(db: Session = Depends(get_db)) -> StatisticsOut:
    return _statistics_payload(QuizService(db).build_statistics())


@router.post(
    "/sessions",
    response_model=QuizSessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Start a quiz session",
)
def start_session() -> QuizSessionOut:
    return _session_payload(session_store.create())


@router.get("/sessions/{session_id}", response_model=QuizSessionOut, summary="Quiz session summary")
def get_session(session_id: str) -> QuizSessionOut:
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="quiz_session_not_found")
    return _session_payload(session)


@router.post("/sessions/{session_id}/reset", response_model=QuizSessionOut, summary="Restart a quiz session")
def reset_session(session_id: str) -> QuizSessionOut:
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="quiz_session_not_found")
    session.reset()
    return _session_payload(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="End a quiz session")
def end_session(session_id: str) -> None:
    session_store.discard(session_id)
