import pytest

from scheduler.data.models import Card, Lesson, Subject


@pytest.fixture
def student(django_user_model):
    return django_user_model.objects.create_user(username="student")


@pytest.fixture
def subject(db):
    return Subject.objects.create(name="Mathematics", abbreviation="MATH", display_order=1)


@pytest.fixture
def lesson(subject):
    lesson = Lesson.objects.create(subject=subject, title="Fractions", is_published=True)
    for order, (front, back) in enumerate(
        [("1/2 + 1/4", "3/4"), ("Simplify 6/8", "3/4"), ("Numerator of 3/4", "3")],
        start=1,
    ):
        Card.objects.create(lesson=lesson, front_content=front, back_content=back,
                            display_order=order)
    return lesson


@pytest.fixture
def cards(lesson):
    return list(lesson.cards.order_by("display_order"))
