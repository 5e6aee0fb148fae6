from django.urls import path
from .views import (
    DueCardsView,
    EndSessionView,
    LessonDetailView,
    LessonListView,
    LessonProgressView,
    ReviewView,
    SessionView,
    SubjectLessonsView,
    SubjectListView,
)

urlpatterns = [
    path("reviews", ReviewView.as_view(), name="review"),
    path("due-cards", DueCardsView.as_view(), name="due-cards"),
    path("subjects", SubjectListView.as_view(), name="subject-list"),
    path("subjects/<int:subject_id>/lessons", SubjectLessonsView.as_view(), name="subject-lessons"),
    path("lessons", LessonListView.as_view(), name="lesson-list"),
    path("lessons/<int:lesson_id>", LessonDetailView.as_view(), name="lesson-detail"),
    path("lessons/<int:lesson_id>/progress", LessonProgressView.as_view(), name="lesson-progress"),
    path("sessions", SessionView.as_view(), name="sessions"),
    path("sessions/<int:session_id>/end", EndSessionView.as_view(), name="session-end"),
]
