import heapq
from datetime import datetime
from itertools import islice
from typing import Iterable, Iterator, List, NamedTuple, Optional

from .state import CardScheduleState

# Reviewed cards sort before unseen ones
_SEEN, _UNSEEN = 0, 1


class DueEntry(NamedTuple):
    card_id: int
    display_order: int = 0
    state: Optional[CardScheduleState] = None


def _sort_key(entry: DueEntry, now: datetime):
    """Heap key for a due entry, or None when the card is not due yet."""
    state = entry.state
    if state is None or state.is_new:
        return (_UNSEEN, entry.display_order, entry.card_id)
    if not state.is_due(now):
        return None
    return (_SEEN, state.due_at(), entry.card_id)


def select_due(entries: Iterable[DueEntry], now: datetime,
               limit: Optional[int] = None) -> Iterator[int]:
    """Yield the ids of the cards due at ``now``, most overdue first.

    Previously reviewed cards come first, by due time then card id. Cards
    never reviewed follow in display order. Only as much of the ordering
    as is consumed gets computed.
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")

    heap = []
    for entry in entries:
        key = _sort_key(entry, now)
        if key is not None:
            heap.append((key, entry.card_id))
    heapq.heapify(heap)

    def drain():
        while heap:
            yield heapq.heappop(heap)[1]

    if limit is None:
        return drain()
    return islice(drain(), limit)


class DueQueue:
    """Due cards for one study session, handed out incrementally.

    The ordering is worked out lazily, at most once; re-iterating the queue
    starts over from the first card.
    """

    def __init__(self, entries: Iterable[DueEntry], now: datetime,
                 limit: Optional[int] = None):
        self.now = now
        self._source = select_due(list(entries), now, limit)
        self._seen: List[int] = []
        self._exhausted = False
        self._cursor = 0

    def _fill(self, upto: Optional[int]) -> None:
        while not self._exhausted and (upto is None or len(self._seen) < upto):
            try:
                self._seen.append(next(self._source))
            except StopIteration:
                self._exhausted = True

    def take(self, n: int) -> List[int]:
        if n < 0:
            raise ValueError("n must be >= 0")
        end = self._cursor + n
        self._fill(end)
        batch = self._seen[self._cursor:end]
        self._cursor += len(batch)
        return batch

    def remaining(self) -> int:
        self._fill(None)
        return len(self._seen) - self._cursor

    def reset(self) -> None:
        self._cursor = 0

    def __iter__(self) -> Iterator[int]:
        i = 0
        while True:
            self._fill(i + 1)
            if i >= len(self._seen):
                return
            yield self._seen[i]
            i += 1

    def __len__(self) -> int:
        self._fill(None)
        return len(self._seen)
