from dataclasses import dataclass, field
from datetime import timedelta
from typing import Mapping

from .enums import GRADE_QUALITY, Grade
from .. import config


@dataclass(frozen=True)
class SchedulerPolicy:
    min_ease_factor: float = config.MIN_EASE_FACTOR
    lapse_ease_penalty: float = config.LAPSE_EASE_PENALTY
    first_interval_days: int = config.FIRST_INTERVAL_DAYS
    second_interval_days: int = config.SECOND_INTERVAL_DAYS
    hard_factor: float = config.HARD_FACTOR
    easy_bonus: float = config.EASY_BONUS
    relearn_delay: timedelta = timedelta(seconds=config.RELEARN_DELAY_SECONDS)
    max_interval_days: int = config.MAX_INTERVAL_DAYS
    grade_quality: Mapping[Grade, int] = field(default_factory=lambda: dict(GRADE_QUALITY))

    def quality(self, grade: Grade) -> int:
        return self.grade_quality[grade]


DEFAULT_POLICY = SchedulerPolicy()
