import json

from tests.utils import create_item
from wordquiz.db.initial_data import DEFAULT_CATEGORIES, DEFAULT_WORDS, seed_initial_data
from wordquiz.models.category_model import Category
from wordquiz.models.vocabulary_item_model import VocabularyItem


def test_seed_populates_empty_dictionary(db_session):
    inserted = seed_initial_data(db_session)

    assert inserted == len(DEFAULT_WORDS)
    assert db_session.query(Category).count() == len(DEFAULT_CATEGORIES)
    items = db_session.query(VocabularyItem).all()
    assert all(not item.is_custom and item.difficulty_level == 0 for item in items)


def test_seed_is_skipped_when_words_exist(db_session):
    create_item(db_session)

    assert seed_initial_data(db_session) == 0
    assert db_session.query(VocabularyItem).count() == 1


def test_seed_reads_words_file(db_session, tmp_path):
    words_file = tmp_path / "words.json"
    words_file.write_text(
        json.dumps(
            [
                {"original": "moon", "translate": "луна", "category": "Nature"},
                {"original": "", "translation": "пусто"},
                {"original": "star", "translation": "звезда"},
            ]
        ),
        encoding="utf-8",
    )

    assert seed_initial_data(db_session, str(words_file)) == 2
    categories = {item.original: item.category for item in db_session.query(VocabularyItem)}
    assert categories == {"moon": "Nature", "star": "General"}


def test_seed_falls_back_to_bundled_words(db_session, tmp_path):
    assert seed_initial_data(db_session, str(tmp_path / "missing.json")) == len(DEFAULT_WORDS)
