from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from ..config import DEFAULT_EASE_FACTOR, MIN_EASE_FACTOR


@dataclass(frozen=True)
class CardScheduleState:
    """Scheduling state of one card for one user."""

    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None
    total_reviews: int = 0
    correct_reviews: int = 0

    @classmethod
    def new(cls) -> "CardScheduleState":
        return cls()

    @property
    def is_new(self) -> bool:
        """True until the card has been scheduled at least once."""
        return self.due_at() is None

    def due_at(self) -> Optional[datetime]:
        """When the card is next due, or None for a card never reviewed."""
        if self.next_review_at is not None:
            return self.next_review_at
        if self.last_reviewed_at is None:
            return None
        return self.last_reviewed_at + timedelta(days=max(0, self.interval))

    def is_due(self, now: datetime) -> bool:
        due = self.due_at()
        return due is None or due <= now

    def normalized(self, min_ease_factor: float = MIN_EASE_FACTOR) -> "CardScheduleState":
        """Clamp out-of-range values, e.g. rows written before a stricter rule."""
        total = max(0, int(self.total_reviews))
        correct = min(max(0, int(self.correct_reviews)), total)
        ease = float(self.ease_factor)
        fixed = replace(
            self,
            ease_factor=ease if ease >= min_ease_factor else min_ease_factor,
            interval=max(0, int(self.interval)),
            repetitions=max(0, int(self.repetitions)),
            total_reviews=total,
            correct_reviews=correct,
        )
        return self if fixed == self else fixed
