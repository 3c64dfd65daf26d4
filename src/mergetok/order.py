"""Merge-priority and unit-granularity conventions selected per vocabulary."""

from enum import Enum

from .errors import FormatError
from .types import Handle, Piece, Score


class ScoreOrder(str, Enum):
    """
    Which end of the score range wins a merge.

    ``DESCENDING`` suits log-probability vocabularies (sentencepiece style):
    the higher score merges first. ``ASCENDING`` suits rank vocabularies
    (tiktoken style): rank 0 merges first. Both break ties in favour of the
    earlier left handle.
    """

    DESCENDING = "descending"
    ASCENDING = "ascending"

    def key(self, score: Score, left: Handle) -> tuple[Score, Handle]:
        """Return a heap key where the smaller key is the preferred merge."""
        if self is ScoreOrder.DESCENDING:
            return (-score, left)
        return (score, left)

    def prefers(self, a: Score, b: Score) -> bool:
        """True if score ``a`` strictly beats score ``b``."""
        if self is ScoreOrder.DESCENDING:
            return a > b
        return a < b

    @classmethod
    def get(cls, name: str) -> "ScoreOrder":
        """Get order by name (case-insensitive)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise FormatError(
                "unknown score order",
                invalid_name=name,
                available=[order.value for order in cls],
            )


class Granularity(str, Enum):
    """Atomic unit an input string is split into before merging."""

    # one unicode code point per unit, pieces are str
    CHAR = "char"
    # one utf-8 byte per unit, pieces are bytes
    BYTE = "byte"

    def split(self, text: str) -> list[Piece]:
        """Split ``text`` into its initial, unmerged units."""
        if self is Granularity.CHAR:
            return list(text)
        return [bytes([b]) for b in text.encode("utf-8")]

    def accepts(self, piece: Piece) -> bool:
        """True if ``piece`` has the Python type this granularity stores."""
        if self is Granularity.CHAR:
            return isinstance(piece, str)
        return isinstance(piece, bytes)

    def join(self, pieces: list[Piece]) -> str:
        """Concatenate pieces back into text."""
        if self is Granularity.CHAR:
            return "".join(pieces)
        return b"".join(pieces).decode("utf-8", errors="replace")

    @classmethod
    def get(cls, name: str) -> "Granularity":
        """Get granularity by name (case-insensitive)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise FormatError(
                "unknown granularity",
                invalid_name=name,
                available=[g.value for g in cls],
            )


__all__ = ["ScoreOrder", "Granularity"]
