from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from scheduler.services.due import study_summary


class UserViewSet(viewsets.ViewSet):
    """
    The signed-in student and their review totals.
    """

    @action(detail=False, methods=["get"])
    def me(self, request):
        """
        Username plus cards seen, cards due now and answer accuracy.
        """
        if not request.user.is_authenticated:
            return Response(
                {"error": "User not authenticated"}, status=status.HTTP_401_UNAUTHORIZED
            )

        summary = study_summary(request.user, timezone.now())
        return Response(
            {
                "username": request.user.username,
                "cards_seen": summary.seen_count,
                "cards_due": summary.due_count,
                "total_reviews": summary.total_reviews,
                "correct_reviews": summary.correct_reviews,
                "accuracy": summary.accuracy,
            },
            status=status.HTTP_200_OK,
        )
