from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
import structlog

from ..data.models import Card, StudySession
from ..data.repos import (
    ease_from_db,
    get_existing_idempotent,
    get_or_create_progress_for_update,
    persist_review,
    save_state,
    to_state,
)
from ..domain.enums import Grade
from ..domain.logic import parse_grade, schedule
from ..utils.time import to_local_iso
from .policy import policy_from_settings
from .sessions import SessionClosedError

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReviewResult:
    next_review_at: datetime
    interval: int
    ease_factor: float
    repetitions: int
    idempotent: bool
    applied: bool = True


def _from_log(log, idempotent):
    return ReviewResult(
        next_review_at=log.next_review_at,
        interval=log.interval,
        ease_factor=ease_from_db(log.ease_factor),
        repetitions=log.repetitions,
        idempotent=idempotent,
        applied=log.applied,
    )


def record_review(user, card_id, grade, idempotency_key: str,
                  reviewed_at=None, session_id=None) -> ReviewResult:
    grade = parse_grade(grade)
    logger.info("review_received",
        user_id=user.pk,
        card_id=card_id,
        grade=int(grade),
        idempotency_key=idempotency_key,
    )

    # Fast path: return previous result if same idempotency_key
    existing = get_existing_idempotent(user, card_id, idempotency_key)
    if existing:
        logger.info("idempotent_reuse",
            user_id=user.pk,
            card_id=card_id,
            next_review_utc=existing.next_review_at.isoformat(),
        )
        return _from_log(existing, True)

    card = get_object_or_404(Card, pk=card_id)
    session = None
    if session_id is not None:
        session = get_object_or_404(StudySession, pk=session_id, user=user)
        if session.ended_at is not None:
            raise SessionClosedError(session)
    now = reviewed_at or timezone.now()

    with transaction.atomic():
        # Serialize schedule update per (user, card)
        progress = get_or_create_progress_for_update(user, card)
        existing = get_existing_idempotent(user, card_id, idempotency_key)
        if existing:
            logger.info("idempotent_reuse_locked", user_id=user.pk, card_id=card_id)
            return _from_log(existing, True)

        new_state = schedule(to_state(progress), grade, now, policy_from_settings())
        applied = save_state(progress, new_state)
        if not applied:
            logger.warning("stale_review_ignored",
                user_id=user.pk,
                card_id=card_id,
                reviewed_at=now.isoformat(),
                stored_reviewed_at=progress.last_reviewed_at.isoformat(),
            )
            new_state = to_state(progress)

        log, was_idempotent = persist_review(
            user, card, grade, idempotency_key, new_state, now,
            applied=applied, session=session,
        )
        if was_idempotent:
            # Same key committed concurrently; undo this state write
            transaction.set_rollback(True)
        elif session is not None:
            _count_in_session(session, grade)

    logger.info("review_scheduled",
        user_id=user.pk,
        card_id=card_id,
        interval_days=log.interval,
        repetitions=log.repetitions,
        next_review_utc=log.next_review_at.isoformat(),
        next_review_local=to_local_iso(log.next_review_at),
    )
    return _from_log(log, was_idempotent)


def _count_in_session(session, grade):
    session = StudySession.objects.select_for_update().get(pk=session.pk)
    session.cards_reviewed += 1
    if grade != Grade.AGAIN:
        session.cards_correct += 1
    session.save(update_fields=["cards_reviewed", "cards_correct"])
