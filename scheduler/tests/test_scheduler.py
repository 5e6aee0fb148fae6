import pytest
import logging
from django.urls import reverse
from django.utils import timezone
from datetime import timedelta

from scheduler.data.models import Lesson, StudySession, Subject, UserProgress

logger = logging.getLogger(__name__)

USER = "student"

# Helpers

def make_review(client, card_id, grade, idem_key, **extra):
    url = reverse("review")
    payload = {
        "card_id": card_id,
        "grade": grade,
        "idempotency_key": idem_key,
        **extra,
    }
    if grade is None:
        del payload["grade"]
    resp = client.post(url, data=payload, content_type="application/json",
                       HTTP_X_USER_NAME=USER)
    data = resp.json()
    logger.info(
        "POST /reviews grade=%s → status=%s interval=%s idempotent=%s",
        grade,
        resp.status_code,
        data.get("interval_days"),
        data.get("idempotent"),
    )
    return resp


def get_due_cards(client, now, **params):
    url = reverse("due-cards")
    resp = client.get(url, {"now": now.isoformat(), **params}, HTTP_X_USER_NAME=USER)
    data = resp.json()
    logger.info(
        "GET /due-cards now=%s → status=%s card_count=%s",
        now.isoformat(),
        resp.status_code,
        len(data["card_ids"]),
    )
    return resp


# Tests

@pytest.mark.django_db
def test_again_is_due_immediately(client, student, cards):
    resp = make_review(client, cards[0].pk, 0, "idem-0")
    data = resp.json()

    assert resp.status_code == 201
    assert data["interval_days"] == 0
    assert data["repetitions"] == 0
    assert data["grade_label"] == "Again"
    assert data["ease_factor"] == pytest.approx(2.3)
    logger.info("✓ Passed: AGAIN due immediately")


@pytest.mark.django_db
def test_first_intervals_labels(client, student, cards):
    d1 = make_review(client, cards[0].pk, 2, "idem-1").json()
    assert d1["interval_days"] == 1
    assert d1["ease_factor"] == pytest.approx(2.6)
    assert d1["grade_label"] == "Good"

    d2 = make_review(client, cards[1].pk, 1, "idem-2").json()
    assert d2["interval_days"] == 1
    assert d2["grade_label"] == "Hard"

    logger.info("✓ Passed: first reviews schedule one day out")


@pytest.mark.django_db
def test_binary_answer_maps_to_grade(client, student, cards):
    wrong = make_review(client, cards[0].pk, None, "idem-wrong", correct=False).json()
    right = make_review(client, cards[1].pk, None, "idem-right", correct=True).json()

    assert wrong["grade_label"] == "Again"
    assert right["grade_label"] == "Good"


@pytest.mark.django_db
@pytest.mark.parametrize("payload", [
    {"grade": 2, "correct": True},
    {},
    {"grade": 4},
    {"grade": "easy"},
])
def test_review_validation(client, student, cards, payload):
    body = {"card_id": cards[0].pk, "idempotency_key": "idem-bad", **payload}
    resp = client.post(reverse("review"), data=body, content_type="application/json",
                       HTTP_X_USER_NAME=USER)
    assert resp.status_code == 400
    assert not UserProgress.objects.exists()


@pytest.mark.django_db
def test_unknown_card_is_404(client, student, cards):
    resp = make_review(client, 999999, 2, "idem-missing")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_requires_user(client, cards):
    resp = client.post(reverse("review"), data={"card_id": cards[0].pk, "grade": 2,
                       "idempotency_key": "x"}, content_type="application/json")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_monotonic_growth_multiple_steps(client, student, cards):
    intervals = []
    for i, g in enumerate([2, 3, 2, 3]):
        resp = make_review(client, cards[0].pk, g, f"idem-grow-{i}")
        intervals.append(resp.json()["interval_days"])

    assert intervals == [1, 8, 22, 83]
    assert all(intervals[i] <= intervals[i+1] for i in range(len(intervals)-1))
    logger.info("✓ Passed: intervals grew monotonically %s", intervals)


@pytest.mark.django_db
def test_idempotency_true_and_false(client, student, cards):
    first = make_review(client, cards[0].pk, 3, "idem-same")
    d1 = first.json()
    assert first.status_code == 201
    assert d1["idempotent"] is False

    second = make_review(client, cards[0].pk, 3, "idem-same")
    d2 = second.json()
    assert second.status_code == 200
    assert d2["idempotent"] is True
    assert d1["next_review_utc"] == d2["next_review_utc"]

    progress = UserProgress.objects.get(user=student, card=cards[0])
    assert progress.total_reviews == 1
    logger.info("✓ Passed: idempotency handled correctly")


@pytest.mark.django_db
def test_progress_row_holds_state(client, student, cards):
    make_review(client, cards[0].pk, 2, "idem-a")
    make_review(client, cards[0].pk, 0, "idem-b")

    p = UserProgress.objects.get(user=student, card=cards[0])
    assert p.lesson_id == cards[0].lesson_id
    assert p.ease_factor == 2400
    assert (p.interval, p.repetitions) == (0, 0)
    assert (p.total_reviews, p.correct_reviews) == (2, 1)
    assert p.next_review_at == p.last_reviewed_at


@pytest.mark.django_db
def test_due_cards_includes_and_excludes(client, student, lesson, cards):
    make_review(client, cards[0].pk, 0, "idem-due")      # due now
    make_review(client, cards[1].pk, 2, "idem-future")   # due in a day

    soon = timezone.now() + timedelta(minutes=2)
    later = timezone.now() + timedelta(days=2)
    before = timezone.now() - timedelta(days=1)

    assert get_due_cards(client, soon).json()["card_ids"] == [cards[0].pk]
    assert get_due_cards(client, before).json()["card_ids"] == []
    assert get_due_cards(client, later).json()["card_ids"] == [cards[0].pk, cards[1].pk]

    # Scoped to the lesson, unseen cards follow in display order
    scoped = get_due_cards(client, soon, lesson_id=lesson.pk).json()
    assert scoped["card_ids"] == [cards[0].pk, cards[2].pk]
    limited = get_due_cards(client, later, lesson_id=lesson.pk, limit=2).json()
    assert limited["card_ids"] == [cards[0].pk, cards[1].pk]

    logger.info("✓ Passed: due-cards includes only due items")


@pytest.mark.django_db
def test_due_cards_unknown_lesson(client, student):
    resp = client.get(reverse("due-cards"), {"lesson_id": 424242}, HTTP_X_USER_NAME=USER)
    assert resp.status_code == 404


@pytest.mark.django_db
def test_interval_cap(client, student, cards):
    last_interval = 0
    for i in range(12):
        resp = make_review(client, cards[0].pk, 3, f"idem-cap-{i}").json()
        last_interval = resp["interval_days"]

    assert 0 < last_interval <= 100 * 365
    logger.info("✓ Passed: interval capped")


@pytest.mark.django_db
def test_lesson_detail_orders_cards(client, student, lesson, cards):
    resp = client.get(reverse("lesson-detail", kwargs={"lesson_id": lesson.pk}),
                      HTTP_X_USER_NAME=USER)
    data = resp.json()

    assert resp.status_code == 200
    assert [c["id"] for c in data["cards"]] == [c.pk for c in cards]
    assert [c["display_order"] for c in data["cards"]] == [1, 2, 3]


@pytest.mark.django_db
def test_lesson_progress(client, student, lesson, cards):
    make_review(client, cards[0].pk, 2, "p-1")
    make_review(client, cards[1].pk, 0, "p-2")

    resp = client.get(reverse("lesson-progress", kwargs={"lesson_id": lesson.pk}),
                      HTTP_X_USER_NAME=USER)
    data = resp.json()

    assert data["card_count"] == 3
    assert data["seen_count"] == 2
    assert data["due_count"] == 2  # the lapsed card and the unseen one
    assert data["total_reviews"] == 2
    assert data["correct_reviews"] == 1
    assert data["accuracy"] == 0.5


@pytest.mark.django_db
def test_study_session_flow(client, student, lesson, cards):
    resp = client.post(reverse("sessions"), data={"lesson_id": lesson.pk},
                       content_type="application/json", HTTP_X_USER_NAME=USER)
    assert resp.status_code == 201
    session_id = resp.json()["id"]

    make_review(client, cards[0].pk, 2, "s-1", session_id=session_id)
    make_review(client, cards[1].pk, 0, "s-2", session_id=session_id)
    make_review(client, cards[1].pk, 0, "s-2", session_id=session_id)  # replay

    end_url = reverse("session-end", kwargs={"session_id": session_id})
    ended = client.post(end_url, HTTP_X_USER_NAME=USER)
    data = ended.json()
    assert ended.status_code == 200
    assert data["cards_reviewed"] == 2
    assert data["cards_correct"] == 1
    assert data["ended_at"] is not None
    assert data["duration_seconds"] >= 0

    assert client.post(end_url, HTTP_X_USER_NAME=USER).status_code == 409
    late = make_review(client, cards[2].pk, 2, "s-3", session_id=session_id)
    assert late.status_code == 409
    assert StudySession.objects.get(pk=session_id).cards_reviewed == 2


@pytest.mark.django_db
def test_session_of_other_user_is_hidden(client, student, django_user_model, lesson, cards):
    other = django_user_model.objects.create_user(username="other")
    session = StudySession.objects.create(user=other, lesson=lesson)

    resp = make_review(client, cards[0].pk, 2, "foreign", session_id=session.pk)
    assert resp.status_code == 404


@pytest.mark.django_db
def test_lesson_list_shows_published(client, student, subject, lesson, cards):
    Lesson.objects.create(subject=subject, title="Draft", is_published=False)

    data = client.get(reverse("lesson-list"), HTTP_X_USER_NAME=USER).json()

    assert data == [{"id": lesson.pk, "subject_id": subject.pk, "title": "Fractions",
                     "difficulty": "", "card_count": 3}]


@pytest.mark.django_db
def test_unpublished_lesson_detail_is_404(client, student, subject):
    draft = Lesson.objects.create(subject=subject, title="Draft", is_published=False)

    resp = client.get(reverse("lesson-detail", kwargs={"lesson_id": draft.pk}),
                      HTTP_X_USER_NAME=USER)
    assert resp.status_code == 404


@pytest.mark.django_db
def test_lesson_detail_includes_subject(client, student, subject, lesson):
    data = client.get(reverse("lesson-detail", kwargs={"lesson_id": lesson.pk}),
                      HTTP_X_USER_NAME=USER).json()

    assert data["subject"] == {"id": subject.pk, "name": "Mathematics", "abbreviation": "MATH",
                               "description": "", "display_order": 1}


@pytest.mark.django_db
def test_subjects_listed_in_display_order(client, student, subject):
    science = Subject.objects.create(name="Science", abbreviation="SCI", display_order=0)

    data = client.get(reverse("subject-list"), HTTP_X_USER_NAME=USER).json()

    assert [s["id"] for s in data] == [science.pk, subject.pk]
    assert data[1]["name"] == "Mathematics"


@pytest.mark.django_db
def test_subject_lessons(client, student, subject, lesson):
    other = Subject.objects.create(name="Science", abbreviation="SCI", display_order=2)
    Lesson.objects.create(subject=other, title="Cells", is_published=True)
    Lesson.objects.create(subject=subject, title="Draft", is_published=False)

    url = reverse("subject-lessons", kwargs={"subject_id": subject.pk})
    data = client.get(url, HTTP_X_USER_NAME=USER).json()

    assert [l["title"] for l in data] == ["Fractions"]
    assert data[0]["card_count"] == 3


@pytest.mark.django_db
def test_unknown_subject_is_404(client, student):
    url = reverse("subject-lessons", kwargs={"subject_id": 424242})
    assert client.get(url, HTTP_X_USER_NAME=USER).status_code == 404
