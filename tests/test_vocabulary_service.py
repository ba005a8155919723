from tests.utils import create_category, create_item
from wordquiz.models.vocabulary_item_model import VocabularyItem
from wordquiz.services.vocabulary_service import VocabularyService


def test_add_item_trims_and_marks_custom(db_session):
    result = VocabularyService(db_session).add_item("  apple ", " яблоко ", None)

    assert result.success
    item = result.value
    assert (item.original, item.translation, item.category) == ("apple", "яблоко", "General")
    assert item.is_custom
    assert item.difficulty_level == 0


def test_add_item_rejects_blank_fields(db_session):
    service = VocabularyService(db_session)

    assert service.add_item("   ", "x").error_code == "blank_original"
    assert service.add_item("x", "").error_code == "blank_translation"
    assert db_session.query(VocabularyItem).count() == 0


def test_list_items_filters(db_session):
    create_item(db_session, original="apple", translation="яблоко", category="Food")
    create_item(db_session, original="Pineapple", translation="ананас", category="Food", difficulty_level=2)
    create_item(db_session, original="table", translation="стол", category="Home")
    service = VocabularyService(db_session)

    assert [item.original for item in service.list_items(search="APPLE").value] == ["Pineapple", "apple"]
    assert [item.original for item in service.list_items(category="Home").value] == ["table"]
    assert [item.original for item in service.list_items(difficulty=2).value] == ["Pineapple"]
    assert [item.original for item in service.list_items(search="стол").value] == ["table"]


def test_list_items_rejects_out_of_range_difficulty(db_session):
    result = VocabularyService(db_session).list_items(difficulty=6)

    assert not result.success
    assert result.error_code == "invalid_difficulty"


def test_update_item_keeps_progress_and_clamps_level(db_session):
    item = create_item(db_session, difficulty_level=2, correct_count=3)
    service = VocabularyService(db_session)

    result = service.update_item(item.id, translation=" кошка ", category=" ")
    assert result.success
    assert result.value.translation == "кошка"
    assert result.value.category == "General"
    assert result.value.correct_count == 3

    assert service.update_item(item.id, difficulty_level=9).value.difficulty_level == 5
    assert service.update_item(item.id, original="  ").error_code == "blank_original"


def test_reset_progress(db_session):
    item = create_item(db_session, difficulty_level=4, correct_count=5, wrong_count=1)

    result = VocabularyService(db_session).reset_progress(item.id)

    assert result.success
    assert (result.value.difficulty_level, result.value.correct_count, result.value.wrong_count) == (0, 0, 0)
    assert result.value.last_reviewed_at is None


def test_only_custom_items_can_be_deleted(db_session):
    bundled = create_item(db_session, original="bundled", is_custom=False)
    custom = create_item(db_session, original="custom", is_custom=True)
    service = VocabularyService(db_session)

    refused = service.delete_item(bundled.id)
    assert refused.error_code == "not_deletable"
    assert refused.status_code == 403

    assert service.delete_item(custom.id).success
    assert db_session.get(VocabularyItem, custom.id) is None
    assert service.delete_item(custom.id).status_code == 404


def test_list_categories_counts_words(db_session):
    create_category(db_session, name="Food", icon="🍎", color="#FF0000")
    create_category(db_session, name="Home", icon="🏠", color="#00FF00")
    create_item(db_session, original="apple", category="Food")
    create_item(db_session, original="pear", category="Food")

    summaries = VocabularyService(db_session).list_categories().value

    assert [(entry.name, entry.word_count) for entry in summaries] == [("Food", 2), ("Home", 0)]


def test_item_accuracy_and_learned_flag(db_session):
    item = create_item(db_session, difficulty_level=4, correct_count=3, wrong_count=1)

    assert item.accuracy == 75.0
    assert item.is_learned
    assert create_item(db_session, original="new").accuracy == 0.0
