"""Typed outcomes returned by the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class VocabularyError(Exception):
    """Domain-specific exception raised when a request fails validation."""

    code: str
    status_code: int = 400
    message: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


@dataclass(slots=True)
class ServiceResult(Generic[T]):
    success: bool
    value: Optional[T] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    status_code: int = 200

    @classmethod
    def ok(cls, value: T | None = None) -> "ServiceResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, code: str, message: str | None = None, status_code: int = 400) -> "ServiceResult[T]":
        return cls(
            success=False,
            error_code=code,
            error_message=message or code,
            status_code=status_code,
        )

    @classmethod
    def from_error(cls, error: VocabularyError) -> "ServiceResult[T]":
        return cls.fail(error.code, error.message, error.status_code)


__all__ = ["ServiceResult", "VocabularyError"]
