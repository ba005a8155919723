import logging
from typing import Generator, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from wordquiz.db import session as session_module
from wordquiz.services.quiz_session import QuizSession, session_store
from wordquiz.services.results import ServiceResult

log = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """Provide a SQLAlchemy session scoped to a single request."""

    db = session_module.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def resolve_quiz_session(session_id: Optional[str]) -> Optional[QuizSession]:
    """Return the live quiz session for *session_id*, if one was given."""

    if not session_id:
        return None
    session = session_store.get(session_id)
    if session is None:
        log.info("Unknown quiz session id %s", session_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="quiz_session_not_found")
    return session


def unwrap(result: ServiceResult):
    """Return the value of a successful result or raise the matching HTTP error."""

    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error_code)
    return result.value
