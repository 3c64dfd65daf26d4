"""
Ordered vocabulary table with first-occurrence text lookup.
"""

import logging
from collections.abc import Iterator
from typing import NamedTuple

from .errors import TokenIdError, VocabularyError
from .order import Granularity, ScoreOrder
from .types import Piece, Score, TokenId

log = logging.getLogger(__name__)


class VocabEntry(NamedTuple):
    """One (text, score) row of a vocabulary."""

    text: Piece
    score: Score


class Vocabulary:
    """
    Ordered list of vocabulary entries plus a text -> id lookup map.

    A token's id is its position in the list. When the same text is added
    more than once, lookup keeps returning the first position; the later
    rows stay in the list (and stay decodable) but are never produced by
    encoding.

    Loaders freeze the vocabulary once populated. A frozen vocabulary is
    read-only and can be shared between threads without locking.
    """

    def __init__(
        self,
        order: ScoreOrder = ScoreOrder.DESCENDING,
        granularity: Granularity = Granularity.CHAR,
    ) -> None:
        self.order = order
        self.granularity = granularity
        self._entries: list[VocabEntry] = []
        # text -> first index
        self._ids: dict[Piece, TokenId] = {}
        self._frozen = False

    def add_entry(self, text: Piece, score: Score) -> TokenId:
        """
        Append an entry and return its index.

        :raises VocabularyError: If the vocabulary is frozen or ``text`` has
            the wrong type for this vocabulary's granularity.
        """
        if self._frozen:
            raise VocabularyError(
                "vocabulary is frozen", vocab_size=len(self._entries)
            )
        if not self.granularity.accepts(text):
            raise VocabularyError(
                f"{self.granularity.value} vocabulary cannot hold "
                f"{type(text).__name__} text {text!r}"
            )
        idx = len(self._entries)
        self._entries.append(VocabEntry(text, score))
        if text in self._ids:
            log.debug(f"entry {idx} shadowed by earlier entry {self._ids[text]}: {text!r}")
        else:
            self._ids[text] = idx
        return idx

    def lookup(self, text: Piece) -> TokenId | None:
        """Return the id of the first entry with ``text``, or None."""
        return self._ids.get(text)

    def entry(self, index: TokenId) -> VocabEntry:
        """
        Return the entry at ``index``.

        :raises TokenIdError: If ``index`` is negative or past the end.
        """
        if not 0 <= index < len(self._entries):
            raise TokenIdError(
                "token id out of range",
                vocab_size=len(self._entries),
                invalid_tok=index,
            )
        return self._entries[index]

    def freeze(self) -> "Vocabulary":
        """Mark the vocabulary read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, text: object) -> bool:
        return text in self._ids

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VocabEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(size={len(self)}, "
            f"order={self.order.value}, granularity={self.granularity.value})"
        )

    @classmethod
    def from_entries(
        cls,
        entries: "dict[Piece, Score] | list[tuple[Piece, Score]]",
        order: ScoreOrder = ScoreOrder.DESCENDING,
        granularity: Granularity | None = None,
    ) -> "Vocabulary":
        """
        Build and freeze a vocabulary from ``(text, score)`` pairs.

        Granularity is inferred from the first text when not given.
        """
        items = list(entries.items()) if isinstance(entries, dict) else list(entries)
        if granularity is None:
            granularity = (
                Granularity.BYTE
                if items and isinstance(items[0][0], bytes)
                else Granularity.CHAR
            )
        vocab = cls(order=order, granularity=granularity)
        for text, score in items:
            vocab.add_entry(text, score)
        return vocab.freeze()


__all__ = ["Vocabulary", "VocabEntry"]
