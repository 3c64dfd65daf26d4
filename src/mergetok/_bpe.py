"""
Core greedy merge loop shared by every tokenizer.
"""

import logging
from dataclasses import dataclass

from typing_extensions import deprecated

from ._heap import MergeCandidate, MergeQueue
from ._sequence import SymbolSequence
from .types import Handle, Piece
from .vocab import Vocabulary

log = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of one merge run over a unit sequence."""

    pieces: list[Piece]
    n_merges: int
    n_stale: int


def _try_push(
    seq: SymbolSequence,
    queue: MergeQueue,
    vocab: Vocabulary,
    left: Handle | None,
    right: Handle | None,
) -> None:
    """Queue the (left, right) merge if both exist and their join is a known piece."""
    if left is None or right is None:
        return
    merged = seq.get(left) + seq.get(right)
    idx = vocab.lookup(merged)
    if idx is None:
        return
    queue.push(
        MergeCandidate(
            left=left,
            right=right,
            score=vocab.entry(idx).score,
            checksum=len(merged),
        )
    )


def merge_pieces(units: list[Piece], vocab: Vocabulary) -> MergeResult:
    """
    Greedily merge adjacent units into vocabulary pieces.

    The best pair under ``vocab.order`` is merged first, with the earlier
    left node winning ties. Only merges whose result is in the vocabulary
    are ever applied.

    :param units: Initial, unmerged pieces in input order.
    :param vocab: Vocabulary supplying merge targets and scores.
    :returns: Final pieces plus merge and stale-candidate counts.
    """
    seq = SymbolSequence()
    queue = MergeQueue(vocab.order)

    prev: Handle | None = None
    for unit in units:
        cur = seq.append(unit)
        _try_push(seq, queue, vocab, prev, cur)
        prev = cur

    n_merges = 0
    n_stale = 0
    while not queue.is_empty():
        cand = queue.pop()

        # either side consumed, or one side has grown since the push
        if (
            cand.left not in seq
            or cand.right not in seq
            or len(seq.get(cand.left)) + len(seq.get(cand.right)) != cand.checksum
        ):
            n_stale += 1
            continue

        # neighbours must be read before the right node is unlinked
        left_nb = seq.prev(cand.left)
        right_nb = seq.next(cand.right)

        seq.set(cand.left, seq.get(cand.left) + seq.get(cand.right))
        seq.remove(cand.right)
        n_merges += 1

        _try_push(seq, queue, vocab, left_nb, cand.left)
        _try_push(seq, queue, vocab, cand.left, right_nb)

    log.debug(
        f"merged {len(units)} units into {len(seq)} pieces "
        f"({n_merges} merges, {n_stale} stale candidates)"
    )
    return MergeResult(pieces=list(seq), n_merges=n_merges, n_stale=n_stale)


@deprecated(
    "Reference implementation for testing only. Use `merge_pieces()` instead."
)
def slow_merge_pieces(units: list[Piece], vocab: Vocabulary) -> list[Piece]:
    """
    Merge units by rescanning every adjacent pair after each merge.

    Picks the best-scored pair, leftmost on ties, which is the same policy
    as :func:`merge_pieces`. Naive algorithm: O(n^2) per input.
    """
    pieces = list(units)
    order = vocab.order

    while True:
        best_idx = -1
        best_score = 0.0
        for i in range(len(pieces) - 1):
            idx = vocab.lookup(pieces[i] + pieces[i + 1])
            if idx is None:
                continue
            score = vocab.entry(idx).score
            # strict comparison keeps the leftmost pair on ties
            if best_idx == -1 or order.prefers(score, best_score):
                best_idx, best_score = i, score

        if best_idx == -1:
            return pieces

        pieces[best_idx : best_idx + 2] = [pieces[best_idx] + pieces[best_idx + 1]]
