from django.conf import settings
from django.db import models
from django.utils import timezone


class Subject(models.Model):
    name = models.CharField(max_length=100, unique=True)
    abbreviation = models.CharField(max_length=16, unique=True)
    description = models.TextField(blank=True, default="")
    display_order = models.IntegerField(default=0)

    class Meta:
        app_label = "scheduler"
        ordering = ["display_order", "id"]

    def __str__(self):
        return self.name


class Lesson(models.Model):
    subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name="lessons")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    difficulty = models.CharField(max_length=16, blank=True, default="")  # easy / medium / hard
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = "scheduler"
        ordering = ["id"]

    def __str__(self):
        return self.title


class Card(models.Model):
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name="cards")
    front_content = models.TextField()
    back_content = models.TextField()
    card_type = models.CharField(max_length=32, default="basic")
    display_order = models.IntegerField()
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        app_label = "scheduler"
        ordering = ["display_order", "id"]
        indexes = [
            models.Index(fields=["lesson", "display_order"], name="card_lesson_order_idx"),
        ]


class UserProgress(models.Model):
    """Persisted CardScheduleState for one (user, card) pair."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    card = models.ForeignKey(Card, on_delete=models.CASCADE)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE)
    ease_factor = models.PositiveIntegerField(default=2500)  # thousandths: 2500 == 2.5
    interval = models.PositiveIntegerField(default=0)  # days
    repetitions = models.PositiveIntegerField(default=0)
    last_reviewed_at = models.DateTimeField(null=True, blank=True)
    next_review_at = models.DateTimeField(null=True, blank=True)
    total_reviews = models.PositiveIntegerField(default=0)
    correct_reviews = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "scheduler"
        unique_together = (("user", "card"),)
        indexes = [
            models.Index(fields=["user", "next_review_at"], name="progress_user_due_idx"),
            models.Index(fields=["user", "lesson"], name="progress_user_lesson_idx"),
        ]


class StudySession(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE)
    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)
    cards_reviewed = models.PositiveIntegerField(default=0)
    cards_correct = models.PositiveIntegerField(default=0)
    duration = models.PositiveIntegerField(null=True, blank=True)  # seconds

    class Meta:
        app_label = "scheduler"


class ReviewLog(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    card = models.ForeignKey(Card, on_delete=models.CASCADE)
    session = models.ForeignKey(StudySession, null=True, blank=True, on_delete=models.SET_NULL)
    grade = models.SmallIntegerField()
    idempotency_key = models.CharField(max_length=64)
    reviewed_at = models.DateTimeField(default=timezone.now)
    applied = models.BooleanField(default=True)
    interval = models.PositiveIntegerField()
    ease_factor = models.PositiveIntegerField()
    repetitions = models.PositiveIntegerField()
    next_review_at = models.DateTimeField()

    class Meta:
        app_label = "scheduler"
        unique_together = (("user", "card", "idempotency_key"),)
        indexes = [
            models.Index(fields=["user", "card", "reviewed_at"], name="reviewlog_user_card_idx"),
        ]
