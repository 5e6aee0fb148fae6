from datetime import datetime, timedelta, timezone

import pytest

from scheduler.domain.selection import DueEntry, DueQueue, select_due
from scheduler.domain.state import CardScheduleState

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


def seen(card_id, next_review_at, display_order=0):
    st = CardScheduleState(
        interval=1, repetitions=1, total_reviews=1, correct_reviews=1,
        last_reviewed_at=next_review_at - timedelta(days=1),
        next_review_at=next_review_at,
    )
    return DueEntry(card_id, display_order, st)


def test_overdue_first_future_excluded():
    entries = [
        seen(3, NOW + timedelta(days=3)),
        seen(2, NOW - timedelta(hours=1)),
        seen(1, NOW - timedelta(days=2)),
    ]
    assert list(select_due(entries, NOW)) == [1, 2]


def test_due_exactly_now_is_included():
    assert list(select_due([seen(5, NOW)], NOW)) == [5]


def test_ties_broken_by_card_id():
    when = NOW - timedelta(hours=3)
    entries = [seen(9, when), seen(4, when), seen(7, when)]
    assert list(select_due(entries, NOW)) == [4, 7, 9]


def test_new_cards_follow_in_display_order():
    entries = [
        DueEntry(10, display_order=3),
        DueEntry(11, display_order=1),
        seen(20, NOW - timedelta(minutes=5), display_order=2),
        DueEntry(12, display_order=2),
    ]
    assert list(select_due(entries, NOW)) == [20, 11, 12, 10]


def test_never_reviewed_state_counts_as_new():
    entries = [
        DueEntry(1, 2, CardScheduleState.new()),
        seen(2, NOW - timedelta(days=1), display_order=5),
    ]
    assert list(select_due(entries, NOW)) == [2, 1]


def test_missing_next_review_is_derived_from_interval():
    st = CardScheduleState(interval=3, repetitions=2, total_reviews=2,
                           last_reviewed_at=NOW - timedelta(days=4))
    later = CardScheduleState(interval=3, repetitions=2, total_reviews=2,
                              last_reviewed_at=NOW - timedelta(days=1))
    entries = [DueEntry(1, 0, st), DueEntry(2, 0, later)]
    assert list(select_due(entries, NOW)) == [1]


def test_limit_truncates():
    entries = [seen(i, NOW - timedelta(hours=i)) for i in range(1, 6)]
    assert list(select_due(entries, NOW, limit=2)) == [5, 4]
    assert list(select_due(entries, NOW, limit=0)) == []


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        select_due([], NOW, limit=-1)


def test_nothing_due():
    assert list(select_due([seen(1, NOW + timedelta(days=1))], NOW)) == []
    assert list(select_due([], NOW)) == []


def test_select_due_is_lazy():
    entries = [seen(i, NOW - timedelta(minutes=i)) for i in range(1, 100)]
    it = select_due(entries, NOW)
    assert next(it) == 99
    assert next(it) == 98


def test_queue_hands_out_cards_incrementally():
    entries = [seen(i, NOW - timedelta(hours=i)) for i in range(1, 6)] + [DueEntry(50, 1)]
    queue = DueQueue(entries, NOW)

    assert queue.take(2) == [5, 4]
    assert queue.remaining() == 4
    assert queue.take(10) == [3, 2, 1, 50]
    assert queue.take(1) == []
    assert len(queue) == 6


def test_queue_restarts():
    entries = [seen(i, NOW - timedelta(hours=i)) for i in range(1, 4)]
    queue = DueQueue(entries, NOW)

    assert queue.take(1) == [3]
    assert list(queue) == [3, 2, 1]
    assert list(queue) == [3, 2, 1]
    queue.reset()
    assert queue.take(3) == [3, 2, 1]


def test_queue_respects_limit():
    entries = [seen(i, NOW - timedelta(hours=i)) for i in range(1, 4)]
    assert list(DueQueue(entries, NOW, limit=2)) == [3, 2]


def test_state_due_flags():
    fresh = CardScheduleState.new()
    assert fresh.is_new and fresh.is_due(NOW)

    lapsed = seen(1, NOW).state
    assert not lapsed.is_new
    assert lapsed.is_due(NOW)
    assert not lapsed.is_due(NOW - timedelta(seconds=1))

    # a scheduled row is not new even with zeroed counters
    imported = CardScheduleState(next_review_at=NOW + timedelta(days=2))
    assert not imported.is_new
    assert list(select_due([DueEntry(7, 0, imported)], NOW)) == []
