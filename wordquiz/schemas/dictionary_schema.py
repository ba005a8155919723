"""Pydantic schemas for the dictionary exchange document and its reports."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

CURRENT_SCHEMA_VERSION = 1


class ExchangeWord(BaseModel):
    """One word of the exchange document: content only, never progress."""

    model_config = ConfigDict(extra="ignore")

    original: str
    translation: str = Field(validation_alias=AliasChoices("translation", "translate"))
    category: Optional[str] = None

    @field_validator("original", "translation", "category", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


class DictionaryImportDocument(BaseModel):
    """Forward-compatible reader: unknown keys are ignored at every level.

    ``words`` is kept raw so that a malformed entry only skips that entry
    instead of rejecting the whole document.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    schema_version: int = Field(
        default=CURRENT_SCHEMA_VERSION,
        validation_alias=AliasChoices("schemaVersion", "schema", "schema_version"),
    )
    exported_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("exportedAt", "exported_at"),
    )
    words: List[Any] = Field(default_factory=list)


class DictionaryExportDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION, alias="schemaVersion")
    exported_at: datetime = Field(alias="exportedAt")
    words: List[ExchangeWord]


class ImportReport(BaseModel):
    success: bool
    added_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    total_processed: int = 0
    message: str


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DictionaryExportDocument",
    "DictionaryImportDocument",
    "ExchangeWord",
    "ImportReport",
]
