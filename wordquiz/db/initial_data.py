import json
import logging
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import Session

from wordquiz.crud import category_crud, vocabulary_crud

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Materials", "icon": "⚙️", "color": "#FF6B6B"},
    {"name": "Medical", "icon": "⚕️", "color": "#4ECDC4"},
    {"name": "General", "icon": "📚", "color": "#95E1D3"},
    {"name": "Social", "icon": "👥", "color": "#FFE66D"},
    {"name": "Science", "icon": "🔬", "color": "#A8E6CF"},
    {"name": "Time", "icon": "⏰", "color": "#FFD3B6"},
    {"name": "Family", "icon": "👨‍👩‍👧", "color": "#FFAAA5"},
    {"name": "Culture", "icon": "🎭", "color": "#FF8B94"},
    {"name": "Communication", "icon": "💬", "color": "#B4A7D6"},
    {"name": "Language", "icon": "🗣️", "color": "#D4A5A5"},
    {"name": "Fun", "icon": "🎉", "color": "#FFDAC1"},
]

DEFAULT_WORDS = [
    ("Aluminium", "Алюминий", "Materials"),
    ("Anaesthetist", "анестезиолог", "Medical"),
    ("Anonymous", "анонимный", "General"),
    ("Ethnicity", "этническая или расовая принадлежность", "Social"),
    ("Facilitate", "облегчать", "General"),
    ("February", "февраль", "Time"),
    ("Hereditary", "наследственный", "Science"),
    ("Hospitable", "гостеприимный", "Social"),
    ("Onomatopoeia", "звукоподражание", "Language"),
    ("Particularly", "в особенности", "General"),
    ("Phenomenon", "феномен", "Science"),
    ("Philosophical", "философский", "Culture"),
    ("Prejudice", "предубеждение", "Social"),
    ("Prioritising", "определение приоритетов", "General"),
    ("Pronunciation", "произношение", "Language"),
    ("Provocatively", "вызывающе", "Communication"),
    ("Regularly", "регулярно", "Time"),
    ("Remuneration", "вознаграждение", "General"),
    ("Statistics", "статистические данные", "Science"),
    ("Thesaurus", "справочник", "General"),
]


def _load_words_file(path: str) -> Optional[List[dict]]:
    """Read a JSON list of ``{original, translation, category}`` entries.

    Returns ``None`` when the file is missing or unusable so the caller can
    fall back to the bundled list.
    """

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Seed file %s unusable (%s), using the bundled word list.", path, exc)
        return None

    if not isinstance(payload, list):
        logger.warning("Seed file %s does not hold a list, using the bundled word list.", path)
        return None

    rows = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        original = str(entry.get("original") or "").strip()
        # Older seed files name the field ``translate``.
        translation = str(entry.get("translation") or entry.get("translate") or "").strip()
        if not original or not translation:
            continue
        rows.append(
            {
                "original": original,
                "translation": translation,
                "category": str(entry.get("category") or "").strip() or "General",
            }
        )
    return rows or None


def seed_initial_data(db: Session, words_file: Optional[str] = None) -> int:
    """Populate categories and the bundled dictionary on first run.

    Nothing is inserted when the vocabulary table already holds items.
    Returns the number of words inserted.
    """

    if vocabulary_crud.count_items(db) > 0:
        logger.info("Dictionary already populated, skipping seed.")
        return 0

    category_crud.upsert_categories(db, DEFAULT_CATEGORIES)

    rows = _load_words_file(words_file) if words_file else None
    if rows is None:
        rows = [
            {"original": original, "translation": translation, "category": category}
            for original, translation, category in DEFAULT_WORDS
        ]

    inserted = vocabulary_crud.bulk_insert(db, rows, is_custom=False)
    logger.info("Seeded %s words and %s categories.", inserted, len(DEFAULT_CATEGORIES))
    return inserted
