"""Export the dictionary to a portable JSON document and merge one back in.

Reconciliation rules on import:

* a word is identified by its trimmed, case-insensitive ``(category, original)``
  pair, never by its database id;
* a matching word only gets its text fields rewritten, its learning progress
  (level, counters, last review) is left untouched;
* a new word is inserted as a custom word with default progress;
* a blank or malformed entry is skipped and counted.

Document-level problems (unreadable source, bad JSON, unsupported schema
version, no words) abort the import before anything is written.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wordquiz.crud import vocabulary_crud
from wordquiz.models.vocabulary_item_model import DEFAULT_CATEGORY
from wordquiz.schemas.dictionary_schema import (
    CURRENT_SCHEMA_VERSION,
    DictionaryExportDocument,
    DictionaryImportDocument,
    ExchangeWord,
)

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    success: bool
    exported_count: int = 0
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, count: int) -> "ExportResult":
        return cls(success=True, exported_count=count)

    @classmethod
    def fail(cls, message: str) -> "ExportResult":
        return cls(success=False, error_message=message)


@dataclass
class ImportResult:
    success: bool
    added_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    error_message: Optional[str] = None

    @property
    def total_processed(self) -> int:
        return self.added_count + self.updated_count + self.skipped_count

    @classmethod
    def ok(cls, added: int, updated: int, skipped: int) -> "ImportResult":
        return cls(success=True, added_count=added, updated_count=updated, skipped_count=skipped)

    @classmethod
    def fail(cls, message: str) -> "ImportResult":
        return cls(success=False, error_message=message)

    def to_user_message(self) -> str:
        if not self.success:
            return self.error_message or "Import failed"
        parts = []
        if self.added_count:
            parts.append(f"{self.added_count} added")
        if self.updated_count:
            parts.append(f"{self.updated_count} updated")
        if self.skipped_count:
            parts.append(f"{self.skipped_count} skipped")
        return "Import finished: " + (", ".join(parts) if parts else "nothing to do")


class RecordOutcome(enum.Enum):
    ADDED = "added"
    UPDATED = "updated"
    SKIPPED = "skipped"


class DictionaryExchangeService:
    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def build_document(self) -> DictionaryExportDocument:
        words = [
            ExchangeWord(
                original=item.original.strip(),
                translation=item.translation.strip(),
                category=(item.category or "").strip(),
            )
            for item in vocabulary_crud.list_items(self.db)
        ]
        return DictionaryExportDocument(
            schema_version=CURRENT_SCHEMA_VERSION,
            exported_at=self._clock(),
            words=words,
        )

    def export_dictionary(self, sink: BinaryIO) -> ExportResult:
        """Serialise every word into *sink* as UTF-8 JSON."""

        document = self.build_document()
        if not document.words:
            return ExportResult.fail("The dictionary is empty, nothing to export")

        payload = document.model_dump_json(by_alias=True, indent=2).encode("utf-8")
        try:
            sink.write(payload)
            sink.flush()
        except (OSError, ValueError) as exc:
            logger.error("Dictionary export failed: %s", exc)
            return ExportResult.fail(f"Export failed: {exc}")

        logger.info("Exported %s words.", len(document.words))
        return ExportResult.ok(len(document.words))

    def export_to_path(self, path: str | Path) -> ExportResult:
        if vocabulary_crud.count_items(self.db) == 0:
            return ExportResult.fail("The dictionary is empty, nothing to export")
        try:
            with open(path, "wb") as sink:
                return self.export_dictionary(sink)
        except OSError as exc:
            logger.error("Cannot open %s for writing: %s", path, exc)
            return ExportResult.fail(f"Cannot open the file for writing: {exc}")

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def import_dictionary(self, source: BinaryIO) -> ImportResult:
        try:
            raw = source.read()
        except (OSError, ValueError) as exc:
            logger.error("Dictionary import could not read its source: %s", exc)
            return ImportResult.fail(f"Cannot read the file: {exc}")
        return self.import_bytes(raw)

    def import_from_path(self, path: str | Path) -> ImportResult:
        try:
            with open(path, "rb") as source:
                return self.import_dictionary(source)
        except OSError as exc:
            logger.error("Cannot open %s: %s", path, exc)
            return ImportResult.fail(f"Cannot open the file: {exc}")

    def import_bytes(self, raw: bytes | str) -> ImportResult:
        document = self._parse_document(raw)
        if isinstance(document, ImportResult):
            return document

        added = updated = skipped = 0
        for entry in document.words:
            outcome = self._process_record(entry)
            if outcome is RecordOutcome.ADDED:
                added += 1
            elif outcome is RecordOutcome.UPDATED:
                updated += 1
            else:
                skipped += 1

        logger.info("Dictionary import: %s added, %s updated, %s skipped.", added, updated, skipped)
        return ImportResult.ok(added, updated, skipped)

    def _parse_document(self, raw: bytes | str) -> DictionaryImportDocument | ImportResult:
        if isinstance(raw, bytes):
            try:
                text = raw.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                return ImportResult.fail(f"The file is not valid UTF-8: {exc}")
        else:
            text = raw

        if not text or not text.strip():
            return ImportResult.fail("The file is empty")

        try:
            payload = json.loads(text)
        except ValueError as exc:
            return ImportResult.fail(f"Invalid JSON: {exc}")

        if not isinstance(payload, dict):
            return ImportResult.fail("Invalid document: a JSON object is expected")

        try:
            document = DictionaryImportDocument.model_validate(payload)
        except ValidationError as exc:
            return ImportResult.fail(f"Invalid document: {exc.errors()[0].get('msg', 'validation error')}")

        if document.schema_version != CURRENT_SCHEMA_VERSION:
            return ImportResult.fail(f"Unsupported schema version: {document.schema_version}")

        if not document.words:
            return ImportResult.fail("The file contains no words")

        return document

    def _process_record(self, entry: Any) -> RecordOutcome:
        try:
            record = ExchangeWord.model_validate(entry)
        except ValidationError:
            logger.debug("Skipping malformed dictionary entry: %r", entry)
            return RecordOutcome.SKIPPED

        if not record.original or not record.translation:
            return RecordOutcome.SKIPPED
        category = record.category or DEFAULT_CATEGORY

        try:
            existing = vocabulary_crud.find_by_normalized_key(self.db, category, record.original)
            if existing is not None:
                vocabulary_crud.update_item(
                    self.db,
                    existing,
                    original=record.original,
                    translation=record.translation,
                    category=category,
                )
                return RecordOutcome.UPDATED

            vocabulary_crud.create_item(
                self.db,
                original=record.original,
                translation=record.translation,
                category=category,
                is_custom=True,
            )
            return RecordOutcome.ADDED
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Skipping dictionary entry '%s' after a database error: %s", record.original, exc)
            return RecordOutcome.SKIPPED


__all__ = [
    "DictionaryExchangeService",
    "ExportResult",
    "ImportResult",
    "RecordOutcome",
]
