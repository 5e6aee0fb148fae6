from dataclasses import dataclass
from typing import Optional

from django.shortcuts import get_object_or_404
import structlog

from ..data.models import Card, Lesson
from ..data.repos import to_state, user_progress
from ..domain.selection import DueEntry, DueQueue

logger = structlog.get_logger()


def due_entries(user, lesson_id=None):
    """
    Selector input for a user. Scoped to a lesson, cards the user never
    reviewed are included as new cards; unscoped, only reviewed cards are.
    """
    rows = user_progress(user, lesson_id).select_related("card")
    entries = [
        DueEntry(p.card_id, p.card.display_order, to_state(p)) for p in rows
    ]
    if lesson_id is not None:
        seen = {e.card_id for e in entries}
        unseen = (Card.objects.filter(lesson_id=lesson_id)
                  .exclude(pk__in=seen)
                  .values_list("pk", "display_order"))
        entries.extend(DueEntry(pk, order) for pk, order in unseen)
    return entries


def due_queue(user, now, lesson_id=None, limit: Optional[int] = None) -> DueQueue:
    if lesson_id is not None:
        get_object_or_404(Lesson, pk=lesson_id)
    return DueQueue(due_entries(user, lesson_id), now, limit)


def due_cards(user, now, lesson_id=None, limit: Optional[int] = None):
    queue = due_queue(user, now, lesson_id, limit)
    card_ids = list(queue)
    logger.info("due_cards_selected",
        user_id=user.pk,
        lesson_id=lesson_id,
        now_utc=now.isoformat(),
        card_count=len(card_ids),
    )
    return card_ids


@dataclass(frozen=True)
class LessonProgress:
    lesson_id: int
    card_count: int
    seen_count: int
    due_count: int
    total_reviews: int
    correct_reviews: int

    @property
    def accuracy(self):
        if not self.total_reviews:
            return None
        return round(self.correct_reviews / self.total_reviews, 4)


def lesson_progress(user, lesson_id, now) -> LessonProgress:
    get_object_or_404(Lesson, pk=lesson_id)
    entries = due_entries(user, lesson_id)
    seen = [e.state for e in entries if e.state is not None]
    return LessonProgress(
        lesson_id=lesson_id,
        card_count=len(entries),
        seen_count=len(seen),
        due_count=len(DueQueue(entries, now)),
        total_reviews=sum(s.total_reviews for s in seen),
        correct_reviews=sum(s.correct_reviews for s in seen),
    )


@dataclass(frozen=True)
class StudySummary:
    seen_count: int
    due_count: int
    total_reviews: int
    correct_reviews: int

    @property
    def accuracy(self):
        if not self.total_reviews:
            return None
        return round(self.correct_reviews / self.total_reviews, 4)


def study_summary(user, now) -> StudySummary:
    """Totals over every card the user has reviewed, across lessons."""
    entries = due_entries(user)
    return StudySummary(
        seen_count=len(entries),
        due_count=len(DueQueue(entries, now)),
        total_reviews=sum(e.state.total_reviews for e in entries),
        correct_reviews=sum(e.state.correct_reviews for e in entries),
    )
