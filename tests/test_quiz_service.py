import random
from collections import Counter
from datetime import datetime, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from tests.utils import create_item, create_items_at_levels
from wordquiz.models.vocabulary_item_model import VocabularyItem
from wordquiz.services.quiz_service import QuizService
from wordquiz.services.quiz_session import QuizSession

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def build_service(db, seed=7, **kwargs) -> QuizService:
    kwargs.setdefault("strategy", "weighted")
    kwargs.setdefault("tier_weights", (0.6, 0.3, 0.1))
    return QuizService(db, rng=random.Random(seed), clock=lambda: FIXED_NOW, **kwargs)


def test_question_holds_target_and_distinct_distractors(db_session):
    create_items_at_levels(db_session, [0, 0, 1, 2, 3])
    service = build_service(db_session)

    question = service.get_next_question(3).value

    assert question is not None
    ids = [item.id for item in question.variants]
    assert len(ids) == 4
    assert len(set(ids)) == 4
    assert question.target.id in ids
    assert question.variants[question.correct_index].id == question.target.id
    assert all(item.id != question.target.id for item in question.distractors)
    assert question.check_answer(question.correct_index)


def test_learned_words_are_never_targets_but_can_be_distractors(db_session):
    learned, *_ = create_items_at_levels(db_session, [5, 0, 2])
    service = build_service(db_session)

    seen_as_variant = False
    for _ in range(200):
        question = service.get_next_question(2).value
        assert question is not None
        assert question.target.difficulty_level < 5
        seen_as_variant = seen_as_variant or any(item.id == learned.id for item in question.variants)

    assert seen_as_variant


def test_single_word_dictionary_has_no_question(db_session):
    create_item(db_session)

    assert build_service(db_session).get_next_question(1).value is None


def test_not_enough_distractors_returns_none(db_session):
    create_items_at_levels(db_session, [0, 1, 2])

    assert build_service(db_session).get_next_question(3).value is None


def test_all_learned_dictionary_is_completed(db_session):
    create_items_at_levels(db_session, [5, 5, 5, 5])

    assert build_service(db_session).get_next_question(3).value is None


def test_empty_dictionary_is_completed(db_session):
    assert build_service(db_session).get_next_question().value is None


def test_distractor_count_must_be_positive(db_session):
    result = build_service(db_session).get_next_question(0)

    assert not result.success
    assert result.error_code == "invalid_distractor_count"
    assert result.status_code == 400


def test_unknown_strategy_is_rejected(db_session):
    with pytest.raises(ValueError):
        QuizService(db_session, strategy="round-robin")


def test_weighted_strategy_follows_tier_weights(db_session):
    unseen, struggling, learning, spare = create_items_at_levels(db_session, [0, 1, 3, 5])
    service = build_service(db_session, seed=1234)

    draws = 3000
    counts = Counter(service.get_next_question(1).value.target.id for _ in range(draws))

    assert counts[spare.id] == 0
    assert counts[unseen.id] / draws == pytest.approx(0.6, abs=0.05)
    assert counts[struggling.id] / draws == pytest.approx(0.3, abs=0.05)
    assert counts[learning.id] / draws == pytest.approx(0.1, abs=0.05)


def test_weighted_strategy_renormalises_over_non_empty_tiers(db_session):
    struggling, learning = create_items_at_levels(db_session, [1, 4])
    service = build_service(db_session, seed=99)

    draws = 2000
    counts = Counter(service.get_next_question(1).value.target.id for _ in range(draws))

    assert counts[struggling.id] / draws == pytest.approx(0.75, abs=0.05)
    assert counts[learning.id] / draws == pytest.approx(0.25, abs=0.05)


def test_zero_weight_tiers_are_still_drawn_when_alone(db_session):
    create_items_at_levels(db_session, [2, 3])
    service = build_service(db_session, tier_weights=(1.0, 0.0, 0.0))

    question = service.get_next_question(1).value

    assert question is not None
    assert question.target.difficulty_level in (2, 3)


def test_priority_strategy_always_picks_lowest_tier(db_session):
    unseen_a, unseen_b, *_ = create_items_at_levels(db_session, [0, 0, 1, 2, 4])
    service = build_service(db_session, strategy="priority")

    targets = {service.get_next_question(2).value.target.id for _ in range(100)}

    assert targets == {unseen_a.id, unseen_b.id}


def test_priority_strategy_moves_on_when_tier_is_empty(db_session):
    _, struggling, _ = create_items_at_levels(db_session, [5, 1, 3])
    service = build_service(db_session, strategy="priority")

    for _ in range(20):
        assert service.get_next_question(2).value.target.id == struggling.id


def test_correct_answer_moves_level_up_and_persists(db_session):
    item = create_item(db_session, difficulty_level=2)
    service = build_service(db_session)

    result = service.submit_answer(item.id, True)

    assert result.success
    db_session.expire_all()
    stored = db_session.get(VocabularyItem, item.id)
    assert stored.difficulty_level == 3
    assert stored.correct_count == 1
    assert stored.wrong_count == 0
    assert stored.last_reviewed_at.replace(tzinfo=timezone.utc) == FIXED_NOW


def test_levels_stay_within_bounds(db_session):
    top = create_item(db_session, original="top", difficulty_level=5)
    bottom = create_item(db_session, original="bottom", difficulty_level=0)
    service = build_service(db_session)

    assert service.submit_answer(top.id, True).value.item.difficulty_level == 5
    assert service.submit_answer(bottom.id, False).value.item.difficulty_level == 0
    assert top.correct_count == 1
    assert bottom.wrong_count == 1


def test_wrong_answer_moves_level_down(db_session):
    item = create_item(db_session, difficulty_level=3, wrong_count=2)

    outcome = build_service(db_session).submit_answer(item.id, False).value

    assert outcome.was_correct is False
    assert outcome.item.difficulty_level == 2
    assert outcome.item.wrong_count == 3


def test_unknown_item_is_reported(db_session):
    result = build_service(db_session).submit_answer(4242, True)

    assert not result.success
    assert result.error_code == "item_not_found"
    assert result.status_code == 404


def test_answer_question_checks_selected_index(db_session):
    create_items_at_levels(db_session, [0, 0, 0, 0])
    service = build_service(db_session)
    session = QuizSession()
    question = service.get_next_question(3).value
    wrong_index = (question.correct_index + 1) % len(question.variants)

    outcome = service.answer_question(question, wrong_index, session).value

    assert outcome.was_correct is False
    assert outcome.item.wrong_count == 1
    assert session.progress_text == "0/1"


def test_session_counts_answer_even_when_saving_fails(db_session, monkeypatch):
    item = create_item(db_session, difficulty_level=1)
    service = build_service(db_session)
    session = QuizSession()

    def failing_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db_session, "commit", failing_commit)
    result = service.submit_answer(item.id, True, session)
    monkeypatch.undo()

    assert not result.success
    assert result.error_code == "persistence_failed"
    assert result.status_code == 500
    assert session.questions_answered == 1
    assert session.correct_answers == 1

    db_session.expire_all()
    stored = db_session.get(VocabularyItem, item.id)
    assert stored.difficulty_level == 1
    assert stored.correct_count == 0


def test_build_statistics_buckets_levels(db_session):
    create_item(db_session, original="a", difficulty_level=0)
    create_item(db_session, original="b", difficulty_level=1, correct_count=2, wrong_count=1)
    create_item(db_session, original="c", difficulty_level=3, correct_count=3, wrong_count=2)
    create_item(db_session, original="d", difficulty_level=4, correct_count=4)
    create_item(db_session, original="e", difficulty_level=5, correct_count=6, wrong_count=2)

    stats = build_service(db_session).build_statistics()

    assert stats.total_items == 5
    assert stats.unseen_count == 1
    assert stats.in_progress_count == 2
    assert stats.learned_count == 2
    assert stats.total_correct == 15
    assert stats.total_wrong == 5
    assert stats.progress_percentage == pytest.approx(40.0)
    assert stats.overall_accuracy == pytest.approx(75.0)


def test_statistics_of_empty_dictionary(db_session):
    stats = build_service(db_session).build_statistics()

    assert stats.total_items == 0
    assert stats.progress_percentage == 0.0
    assert stats.overall_accuracy == 0.0


def test_three_item_dictionary_with_learned_word(db_session):
    items = create_items_at_levels(db_session, [0, 2, 5])

    question = build_service(db_session).get_next_question(2).value

    assert question is not None
    assert question.target.id in {items[0].id, items[1].id}
    assert {item.id for item in question.variants} == {item.id for item in items}
    assert len(question.distractors) == 2


def test_one_item_dictionary_cannot_fill_three_distractors(db_session):
    create_item(db_session)

    assert build_service(db_session).get_next_question(3).value is None


def test_repeated_submissions_stay_bounded(db_session):
    item = create_item(db_session, difficulty_level=3)
    service = build_service(db_session)

    for _ in range(8):
        service.submit_answer(item.id, True)
    assert item.difficulty_level == 5
    assert item.correct_count == 8

    for _ in range(8):
        service.submit_answer(item.id, False)
    assert item.difficulty_level == 0
    assert item.wrong_count == 8


def test_out_of_range_stored_levels_are_bounded_on_answer(db_session):
    high, low = create_items_at_levels(db_session, [0, 0])
    db_session.execute(update(VocabularyItem).where(VocabularyItem.id == high.id).values(difficulty_level=7))
    db_session.execute(update(VocabularyItem).where(VocabularyItem.id == low.id).values(difficulty_level=-2))
    db_session.commit()
    db_session.expire_all()
    service = build_service(db_session)

    assert service.submit_answer(high.id, False).value.item.difficulty_level == 4
    assert service.submit_answer(low.id, True).value.item.difficulty_level == 1


def test_model_clamps_levels_and_counters_on_write(db_session):
    item = create_item(db_session, difficulty_level=9, correct_count=-3)

    assert item.difficulty_level == 5
    assert item.correct_count == 0

    item.difficulty_level = -4
    db_session.commit()
    db_session.refresh(item)
    assert item.difficulty_level == 0
