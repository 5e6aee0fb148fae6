from django.db import IntegrityError, transaction

from ..domain.state import CardScheduleState
from .models import ReviewLog, UserProgress

EASE_SCALE = 1000


def ease_to_db(ease_factor: float) -> int:
    return int(round(ease_factor * EASE_SCALE))


def ease_from_db(value: int) -> float:
    return value / EASE_SCALE


def to_state(progress):
    """Domain state for a progress row; None means the card was never reviewed."""
    if progress is None:
        return None
    return CardScheduleState(
        ease_factor=ease_from_db(progress.ease_factor),
        interval=progress.interval,
        repetitions=progress.repetitions,
        last_reviewed_at=progress.last_reviewed_at,
        next_review_at=progress.next_review_at,
        total_reviews=progress.total_reviews,
        correct_reviews=progress.correct_reviews,
    )


def apply_state(progress, state: CardScheduleState):
    progress.ease_factor = ease_to_db(state.ease_factor)
    progress.interval = state.interval
    progress.repetitions = state.repetitions
    progress.last_reviewed_at = state.last_reviewed_at
    progress.next_review_at = state.next_review_at
    progress.total_reviews = state.total_reviews
    progress.correct_reviews = state.correct_reviews
    return progress


STATE_FIELDS = [
    "ease_factor", "interval", "repetitions", "last_reviewed_at",
    "next_review_at", "total_reviews", "correct_reviews", "updated_at",
]


def get_or_create_progress_for_update(user, card):
    """
    Fetch the progress row and lock it for update to avoid races.
    Create if missing. Must run inside a transaction.
    """
    try:
        return (UserProgress.objects
                .select_for_update()
                .get(user=user, card=card))
    except UserProgress.DoesNotExist:
        pass
    try:
        with transaction.atomic():
            created = UserProgress.objects.create(user=user, card=card, lesson_id=card.lesson_id)
    except IntegrityError:
        # Created concurrently; fall through and lock theirs
        created = None
    lookup = {"pk": created.pk} if created else {"user": user, "card": card}
    return UserProgress.objects.select_for_update().get(**lookup)


def save_state(progress, state: CardScheduleState) -> bool:
    """
    Write ``state`` onto the locked row, last write wins on last_reviewed_at.
    Returns False (and writes nothing) when the row holds a newer review.
    """
    stored = progress.last_reviewed_at
    if stored is not None and state.last_reviewed_at is not None and state.last_reviewed_at < stored:
        return False
    apply_state(progress, state)
    progress.save(update_fields=STATE_FIELDS)
    return True


def user_progress(user, lesson_id=None):
    qs = UserProgress.objects.filter(user=user)
    if lesson_id is not None:
        qs = qs.filter(lesson_id=lesson_id)
    return qs


def get_existing_idempotent(user, card_id, idem_key):
    return ReviewLog.objects.filter(
        user=user, card_id=card_id, idempotency_key=idem_key
    ).first()


def persist_review(user, card, grade, idem_key, state: CardScheduleState,
                   reviewed_at, applied=True, session=None):
    """
    Insert ReviewLog; if a concurrent duplicate slips in, return the existing one.
    """
    try:
        with transaction.atomic():
            return ReviewLog.objects.create(
                user=user, card=card, session=session, grade=int(grade),
                idempotency_key=idem_key, reviewed_at=reviewed_at, applied=applied,
                interval=state.interval, ease_factor=ease_to_db(state.ease_factor),
                repetitions=state.repetitions, next_review_at=state.next_review_at,
            ), False
    except IntegrityError:
        # Duplicate idempotency key safeguard
        existing = get_existing_idempotent(user, card.pk, idem_key)
        return existing, True
