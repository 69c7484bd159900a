"""Tests for the SM-2 family scheduler."""

import itertools
from dataclasses import replace
from datetime import timedelta

import pytest

from cadence.application.scheduler import (
    Sm2Scheduler,
    format_interval,
    get_rating_label,
    round_half_up,
)
from cadence.domain.errors import InvalidRatingError
from cadence.domain.models import Difficulty, Rating, SchedulingParameters


@pytest.fixture
def new_card(scheduler, now):
    return scheduler.initialize_card("q-42", "algorithms", "advanced", now)


def _with(card, **changes):
    return replace(card, **changes)


class TestInitializeCard:
    def test_defaults(self, new_card, now):
        assert new_card.ease_factor == 2.5
        assert new_card.interval_days == 0
        assert new_card.repetitions == 0
        assert new_card.due_date == now
        assert new_card.mastery_level == 0
        assert new_card.last_reviewed_at is None
        assert new_card.difficulty is Difficulty.ADVANCED

    def test_uses_configured_default_ease(self, now):
        scheduler = Sm2Scheduler(SchedulingParameters(default_ease=2.0))
        card = scheduler.initialize_card("q", "c", "beginner", now)
        assert card.ease_factor == 2.0


class TestRecordReview:
    def test_three_goods_follow_bootstrap_then_growth(self, scheduler, new_card, now):
        card = new_card
        intervals = [card.interval_days]
        reps = [card.repetitions]
        t = now
        for _ in range(3):
            card = scheduler.record_review(card, Rating.GOOD, t)
            intervals.append(card.interval_days)
            reps.append(card.repetitions)
            t = card.due_date + timedelta(minutes=1)

        assert intervals == [0, 1, 6, round(6 * 2.5)]
        assert reps == [0, 1, 2, 3]
        assert card.ease_factor == 2.5

    def test_again_resets_progress(self, scheduler, new_card, now):
        card = _with(new_card, repetitions=5, interval_days=30)
        result = scheduler.record_review(card, Rating.AGAIN, now)

        assert result.repetitions == 0
        assert result.interval_days == 0
        assert result.due_date == now
        assert result.ease_factor == pytest.approx(2.2)

    def test_again_clamps_ease_at_floor(self, scheduler, new_card, now):
        card = _with(new_card, ease_factor=1.35, repetitions=3, interval_days=10)
        result = scheduler.record_review(card, "again", now)
        assert result.ease_factor == 1.3

    def test_hard_shrinks_interval_and_ease(self, scheduler, new_card, now):
        card = _with(new_card, repetitions=2, interval_days=6)
        result = scheduler.record_review(card, Rating.HARD, now)

        # ease 2.5 - 0.15 = 2.35; round(6 * 2.35) = 14; 14 * 0.8 = 11.2
        assert result.ease_factor == pytest.approx(2.35)
        assert result.interval_days == 11
        assert result.repetitions == 3

    def test_easy_grows_interval_and_ease(self, scheduler, new_card, now):
        card = _with(new_card, repetitions=2, interval_days=6)
        result = scheduler.record_review(card, Rating.EASY, now)

        # ease 2.65; round(6 * 2.65) = 16; 16 * 1.3 = 20.8
        assert result.ease_factor == pytest.approx(2.65)
        assert result.interval_days == 21

    def test_multipliers_apply_to_bootstrap_intervals(self, scheduler, new_card, now):
        second = _with(new_card, repetitions=1, interval_days=1)
        assert scheduler.record_review(second, Rating.HARD, now).interval_days == 5  # 4.8
        assert scheduler.record_review(second, Rating.EASY, now).interval_days == 8  # 7.8
        # 1 * 0.8 still rounds to a full day
        assert scheduler.record_review(new_card, Rating.HARD, now).interval_days == 1

    def test_passing_rating_never_schedules_same_day(self, scheduler, new_card, now):
        # A progressed card that somehow carries a zero interval
        card = _with(new_card, repetitions=4, interval_days=0)
        result = scheduler.record_review(card, Rating.GOOD, now)
        assert result.interval_days == 1

    def test_interval_capped(self, scheduler, new_card, now):
        card = _with(new_card, repetitions=6, interval_days=100)
        result = scheduler.record_review(card, Rating.GOOD, now)
        assert result.interval_days == 180
        assert result.due_date == now + timedelta(days=180)

    def test_ease_ceiling(self, scheduler, new_card, now):
        card = _with(new_card, ease_factor=2.95)
        result = scheduler.record_review(card, Rating.EASY, now)
        assert result.ease_factor == 3.0

    def test_bookkeeping_fields(self, scheduler, new_card, now):
        result = scheduler.record_review(new_card, Rating.GOOD, now)
        assert result.last_reviewed_at == now
        assert result.total_reviews == 1
        assert result.due_date == now + timedelta(days=1)
        again = scheduler.record_review(result, Rating.AGAIN, now + timedelta(days=1))
        assert again.total_reviews == 2

    def test_input_card_is_not_mutated(self, scheduler, new_card, now):
        before = replace(new_card)
        scheduler.record_review(new_card, Rating.EASY, now)
        assert new_card == before

    def test_deterministic(self, scheduler, new_card, now):
        card = _with(new_card, repetitions=3, interval_days=15, ease_factor=2.2)
        for rating in Rating:
            assert scheduler.record_review(card, rating, now) == scheduler.record_review(
                card, rating, now
            )

    def test_invalid_rating(self, scheduler, new_card, now):
        with pytest.raises(InvalidRatingError):
            scheduler.record_review(new_card, "perfect", now)

    def test_custom_parameters(self, new_card, now):
        scheduler = Sm2Scheduler(
            SchedulingParameters(relearn_interval_days=1, first_interval_days=2)
        )
        assert scheduler.record_review(new_card, Rating.GOOD, now).interval_days == 2
        assert scheduler.record_review(new_card, Rating.AGAIN, now).interval_days == 1


class TestInvariantsOverRatingSequences:
    """Every rating sequence of length 5 keeps the card invariants."""

    def test_all_sequences(self, scheduler, new_card, now):
        for sequence in itertools.product(list(Rating), repeat=5):
            card = new_card
            t = now
            streak = 0
            for rating in sequence:
                card = scheduler.record_review(card, rating, t)
                streak = 0 if rating is Rating.AGAIN else streak + 1

                assert card.ease_factor >= 1.3
                assert card.ease_factor <= 3.0
                assert card.interval_days >= 0
                assert card.due_date >= t
                assert card.repetitions == streak
                if rating is Rating.AGAIN:
                    assert card.interval_days == 0
                else:
                    assert card.interval_days >= 1
                t = card.due_date


class TestPreview:
    def test_new_card(self, scheduler, new_card):
        assert scheduler.preview_intervals(new_card) == {
            Rating.AGAIN: 0,
            Rating.HARD: 1,
            Rating.GOOD: 1,
            Rating.EASY: 1,
        }

    def test_progressed_card(self, scheduler, new_card):
        card = _with(new_card, repetitions=2, interval_days=6)
        assert scheduler.preview_intervals(card) == {
            Rating.AGAIN: 0,
            Rating.HARD: 11,
            Rating.GOOD: 15,
            Rating.EASY: 21,
        }


@pytest.mark.parametrize(
    "days, text",
    [(0, "now"), (1, "1d"), (6, "6d"), (7, "1w"), (11, "2w"), (29, "4w"), (30, "1mo"), (45, "2mo")],
)
def test_format_interval(days, text):
    assert format_interval(days) == text


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(4.49) == 4


def test_rating_labels():
    assert [get_rating_label(r) for r in Rating] == ["Again", "Hard", "Good", "Easy"]
    assert get_rating_label(3) == "Good"
