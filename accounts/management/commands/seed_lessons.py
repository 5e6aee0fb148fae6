import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

import scheduler
from accounts.models import User
from scheduler.data.models import Card, Lesson, Subject

DEFAULT_FILE = os.path.join(
    os.path.dirname(scheduler.__file__), "fixtures", "sample_lessons.json"
)


class Command(BaseCommand):
    help = "Load lessons and cards from a JSON file and create demo users."

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default=DEFAULT_FILE, help="JSON file to load lessons from"
        )
        parser.add_argument(
            "--users", type=int, default=5, help="Number of demo students to create"
        )
        parser.add_argument(
            "--reset", action="store_true", help="Delete existing subjects and lessons first"
        )

    def handle(self, *args, **options):
        path = os.path.normpath(options["file"])
        try:
            with open(path, encoding="utf-8") as json_file:
                payload = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data from {path}: {e}") from e

        with transaction.atomic():
            if options["reset"]:
                Subject.objects.all().delete()
                self.stdout.write(self.style.SUCCESS("All existing subjects and lessons have been deleted"))

            lesson_count = card_count = 0
            for position, entry in enumerate(payload.get("subjects", []), start=1):
                subject, _ = Subject.objects.get_or_create(
                    name=entry["name"],
                    defaults={
                        "abbreviation": entry.get("abbreviation", entry["name"][:16].upper()),
                        "description": entry.get("description", ""),
                        "display_order": entry.get("display_order", position),
                    },
                )
                for item in entry.get("lessons", []):
                    lesson_count += 1
                    lesson = Lesson.objects.create(
                        subject=subject,
                        title=item["title"],
                        description=item.get("description", ""),
                        difficulty=item.get("difficulty", ""),
                        is_published=item.get("is_published", True),
                    )
                    for order, card in enumerate(item.get("cards", []), start=1):
                        Card.objects.create(
                            lesson=lesson,
                            front_content=card["front"],
                            back_content=card["back"],
                            card_type=card.get("type", "basic"),
                            display_order=card.get("display_order", order),
                            metadata=card.get("metadata", {}),
                        )
                        card_count += 1

            for i in range(1, options["users"] + 1):
                username = f"student{i}"
                if not User.objects.filter(username=username).exists():
                    User.objects.create_user(
                        username, email=f"{username}@example.com", password="testpassword"
                    )

        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {lesson_count} lessons ({card_count} cards) from {path}"
            )
        )
