"""Priority queue of pending merges with lazy invalidation."""

import heapq
from dataclasses import dataclass
from itertools import count

from .order import ScoreOrder
from .types import Handle, Score


@dataclass(frozen=True, slots=True)
class MergeCandidate:
    """
    A proposed fusion of two adjacent sequence nodes.

    ``checksum`` is the length of the merged piece when the candidate was
    created. Node content only ever grows, so a different length at pop time
    means one side has merged since and the candidate is stale.
    """

    left: Handle
    right: Handle
    score: Score
    checksum: int


class MergeQueue:
    """
    Binary heap of :class:`MergeCandidate` ordered by a :class:`ScoreOrder`.

    There is no remove or decrease-key; stale entries are left in place and
    the caller discards them on pop.
    """

    def __init__(self, order: ScoreOrder = ScoreOrder.DESCENDING) -> None:
        self.order = order
        self._heap: list[tuple[tuple[Score, Handle], int, MergeCandidate]] = []
        # push counter keeps heap entries totally ordered without comparing candidates
        self._seq = count()

    def push(self, candidate: MergeCandidate) -> None:
        key = self.order.key(candidate.score, candidate.left)
        heapq.heappush(self._heap, (key, next(self._seq), candidate))

    def pop(self) -> MergeCandidate:
        """Remove and return the preferred candidate."""
        if not self._heap:
            raise IndexError("pop from an empty merge queue")
        return heapq.heappop(self._heap)[2]

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
