from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .enums import Grade
from .errors import InvalidGradeError
from .policy import DEFAULT_POLICY, SchedulerPolicy
from .state import CardScheduleState


def parse_grade(value) -> Grade:
    # bool is an int subclass, but True/False are not grades
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidGradeError(value)
    try:
        return Grade(value)
    except ValueError:
        raise InvalidGradeError(value) from None


def round_half_up(value: float, places: int = 0) -> Decimal:
    exp = Decimal(1).scaleb(-places)
    return Decimal(repr(value)).quantize(exp, rounding=ROUND_HALF_UP)


def next_ease_factor(ease_factor: float, quality: int, policy: SchedulerPolicy) -> float:
    """SM-2 ease update for a passing review of the given quality (0-5)."""
    miss = 5 - quality
    ease = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return _clamp_ease(ease, policy)


def _clamp_ease(ease: float, policy: SchedulerPolicy) -> float:
    return max(policy.min_ease_factor, ease)


def _next_interval(grade: Grade, interval: int, repetitions: int,
                   ease_factor: float, policy: SchedulerPolicy) -> int:
    if repetitions == 1:
        days = float(policy.first_interval_days)
    elif repetitions == 2:
        days = float(policy.second_interval_days)
    else:
        days = interval * ease_factor

    if grade == Grade.HARD:
        days *= policy.hard_factor
    elif grade == Grade.EASY:
        days *= policy.easy_bonus

    rounded = int(round_half_up(days))
    return min(max(1, rounded), policy.max_interval_days)


def schedule(state: Optional[CardScheduleState], grade, now: datetime,
             policy: Optional[SchedulerPolicy] = None) -> CardScheduleState:
    """Compute the scheduling state that follows one review.

    ``state`` is the card's current state, or None for a card the user has
    never reviewed. ``now`` is the review time; it is never read from a
    clock here, so the same arguments always give the same result.
    """
    policy = policy or DEFAULT_POLICY
    grade = parse_grade(grade)
    state = (state or CardScheduleState.new()).normalized(policy.min_ease_factor)

    if grade == Grade.AGAIN:
        repetitions = 0
        interval = 0
        ease = _clamp_ease(state.ease_factor - policy.lapse_ease_penalty, policy)
        next_review_at = now + policy.relearn_delay
    else:
        repetitions = state.repetitions + 1
        ease = next_ease_factor(state.ease_factor, policy.quality(grade), policy)
        interval = _next_interval(grade, state.interval, repetitions, ease, policy)
        next_review_at = now + timedelta(days=interval)

    return CardScheduleState(
        ease_factor=ease,
        interval=interval,
        repetitions=repetitions,
        last_reviewed_at=now,
        next_review_at=next_review_at,
        total_reviews=state.total_reviews + 1,
        correct_reviews=state.correct_reviews + (0 if grade == Grade.AGAIN else 1),
    )
