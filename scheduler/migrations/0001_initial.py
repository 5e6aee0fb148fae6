import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Subject",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("abbreviation", models.CharField(max_length=16, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("display_order", models.IntegerField(default=0)),
            ],
            options={
                "ordering": ["display_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Lesson",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("difficulty", models.CharField(blank=True, default="", max_length=16)),
                ("is_published", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("subject", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lessons", to="scheduler.subject")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Card",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("front_content", models.TextField()),
                ("back_content", models.TextField()),
                ("card_type", models.CharField(default="basic", max_length=32)),
                ("display_order", models.IntegerField()),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("lesson", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="cards", to="scheduler.lesson")),
            ],
            options={
                "ordering": ["display_order", "id"],
                "indexes": [models.Index(fields=["lesson", "display_order"], name="card_lesson_order_idx")],
            },
        ),
        migrations.CreateModel(
            name="StudySession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("cards_reviewed", models.PositiveIntegerField(default=0)),
                ("cards_correct", models.PositiveIntegerField(default=0)),
                ("duration", models.PositiveIntegerField(blank=True, null=True)),
                ("lesson", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="scheduler.lesson")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="UserProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ease_factor", models.PositiveIntegerField(default=2500)),
                ("interval", models.PositiveIntegerField(default=0)),
                ("repetitions", models.PositiveIntegerField(default=0)),
                ("last_reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("next_review_at", models.DateTimeField(blank=True, null=True)),
                ("total_reviews", models.PositiveIntegerField(default=0)),
                ("correct_reviews", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("card", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="scheduler.card")),
                ("lesson", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="scheduler.lesson")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "next_review_at"], name="progress_user_due_idx"),
                    models.Index(fields=["user", "lesson"], name="progress_user_lesson_idx"),
                ],
                "unique_together": {("user", "card")},
            },
        ),
        migrations.CreateModel(
            name="ReviewLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("grade", models.SmallIntegerField()),
                ("idempotency_key", models.CharField(max_length=64)),
                ("reviewed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("applied", models.BooleanField(default=True)),
                ("interval", models.PositiveIntegerField()),
                ("ease_factor", models.PositiveIntegerField()),
                ("repetitions", models.PositiveIntegerField()),
                ("next_review_at", models.DateTimeField()),
                ("card", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="scheduler.card")),
                ("session", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="scheduler.studysession")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["user", "card", "reviewed_at"], name="reviewlog_user_card_idx")],
                "unique_together": {("user", "card", "idempotency_key")},
            },
        ),
    ]
