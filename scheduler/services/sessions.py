from django.db import transaction
from django.shortcuts import get_object_or_404
import structlog

from ..data.models import Lesson, StudySession

logger = structlog.get_logger()


class SessionClosedError(Exception):
    def __init__(self, session):
        self.session = session
        super().__init__(f"study session {session.pk} already ended")


def start_session(user, lesson_id, now) -> StudySession:
    lesson = get_object_or_404(Lesson, pk=lesson_id)
    session = StudySession.objects.create(user=user, lesson=lesson, started_at=now)
    logger.info("session_started", user_id=user.pk, lesson_id=lesson.pk, session_id=session.pk)
    return session


def end_session(user, session_id, now) -> StudySession:
    with transaction.atomic():
        session = get_object_or_404(
            StudySession.objects.select_for_update(), pk=session_id, user=user
        )
        if session.ended_at is not None:
            raise SessionClosedError(session)
        session.ended_at = now
        session.duration = max(0, int((now - session.started_at).total_seconds()))
        session.save(update_fields=["ended_at", "duration"])

    logger.info("session_ended",
        user_id=user.pk,
        session_id=session.pk,
        cards_reviewed=session.cards_reviewed,
        cards_correct=session.cards_correct,
        duration_seconds=session.duration,
    )
    return session
