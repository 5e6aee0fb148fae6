from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import permissions, views, status
from rest_framework.response import Response
import structlog
import uuid
from ..data.models import Lesson, Subject
from ..domain.enums import GRADE_LABELS, Grade, grade_from_correct
from ..services.due import due_cards, lesson_progress
from ..services.reviews import record_review
from ..services.sessions import SessionClosedError, end_session, start_session
from ..utils.time import to_local_iso
from .serializers import (
    DueQuerySerializer,
    LessonSerializer,
    ReviewInSerializer,
    SessionInSerializer,
    SubjectSerializer,
)

base_logger = structlog.get_logger()


def _session_payload(session):
    return {
        "id": session.pk,
        "lesson_id": session.lesson_id,
        "started_at": session.started_at.isoformat(),
        "ended_at": session.ended_at.isoformat() if session.ended_at else None,
        "cards_reviewed": session.cards_reviewed,
        "cards_correct": session.cards_correct,
        "duration_seconds": session.duration,
    }


class ReviewView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        # Create a unique request_id
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if "grade" in data:
            grade = Grade(data["grade"])
        else:
            grade = grade_from_correct(data["correct"])

        try:
            result = record_review(
                request.user,
                data["card_id"],
                grade,
                data["idempotency_key"],
                reviewed_at=data.get("reviewed_at"),
                session_id=data.get("session_id"),
            )
        except SessionClosedError as e:
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)

        status_code = status.HTTP_200_OK if result.idempotent else status.HTTP_201_CREATED

        # Log with request_id & relevant context
        logger.info(
            "review_api_response",
            user_id=request.user.pk,
            card_id=data["card_id"],
            grade=int(grade),
            idempotent=result.idempotent,
            applied=result.applied,
            interval_days=result.interval,
            next_review_utc=result.next_review_at.isoformat(),
            status=status_code,
        )

        return Response(
            {
                "next_review_utc": result.next_review_at.isoformat(),
                "next_review_local": to_local_iso(result.next_review_at),
                "interval_days": result.interval,
                "ease_factor": result.ease_factor,
                "repetitions": result.repetitions,
                "grade_label": GRADE_LABELS[grade],
                "idempotent": result.idempotent,
                "applied": result.applied,
            },
            status=status_code,
        )


class DueCardsView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        # Create a unique request_id
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        now = qs.validated_data.get("now") or timezone.now()
        lesson_id = qs.validated_data.get("lesson_id")

        results = due_cards(request.user, now, lesson_id, qs.validated_data.get("limit"))

        logger.info(
            "due_cards_api_response",
            user_id=request.user.pk,
            lesson_id=lesson_id,
            now_utc=now.isoformat(),
            card_count=len(results),
        )

        return Response(
            {
                "now_utc": now.isoformat(),
                "now_local": to_local_iso(now),
                "lesson_id": lesson_id,
                "card_ids": results,
            }
        )


class LessonDetailView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, lesson_id):
        lessons = Lesson.objects.filter(is_published=True).select_related("subject")
        lesson = get_object_or_404(lessons.prefetch_related("cards"), pk=lesson_id)
        return Response(LessonSerializer(lesson).data)


class LessonProgressView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, lesson_id):
        p = lesson_progress(request.user, lesson_id, timezone.now())
        return Response(
            {
                "lesson_id": p.lesson_id,
                "card_count": p.card_count,
                "seen_count": p.seen_count,
                "due_count": p.due_count,
                "total_reviews": p.total_reviews,
                "correct_reviews": p.correct_reviews,
                "accuracy": p.accuracy,
            }
        )


class SessionView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        s = SessionInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        session = start_session(request.user, s.validated_data["lesson_id"], timezone.now())
        return Response(_session_payload(session), status=status.HTTP_201_CREATED)


class EndSessionView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, session_id):
        try:
            session = end_session(request.user, session_id, timezone.now())
        except SessionClosedError as e:
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(_session_payload(session))


def _lesson_rows(lessons):
    lessons = lessons.filter(is_published=True).annotate(card_count=Count("cards"))
    return [
        {
            "id": l.pk,
            "subject_id": l.subject_id,
            "title": l.title,
            "difficulty": l.difficulty,
            "card_count": l.card_count,
        }
        for l in lessons
    ]


class LessonListView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(_lesson_rows(Lesson.objects.all()))


class SubjectListView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(SubjectSerializer(Subject.objects.all(), many=True).data)


class SubjectLessonsView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, subject_id):
        subject = get_object_or_404(Subject, pk=subject_id)
        return Response(_lesson_rows(subject.lessons.all()))
