"""Unit tests for vocabulary construction and lookup."""

import pytest

from mergetok import Granularity, ScoreOrder, Vocabulary
from mergetok.errors import TokenIdError, VocabularyError


def test_first_occurrence_wins():
    """Duplicate texts resolve to the first index and stay in the list."""
    vocab = Vocabulary()
    assert vocab.add_entry("a", 1.0) == 0
    assert vocab.add_entry("b", 2.0) == 1
    assert vocab.add_entry("a", 9.0) == 2
    assert vocab.add_entry("a", 3.0) == 3

    assert vocab.lookup("a") == 0
    assert len(vocab) == 4
    assert vocab.entry(2).text == "a"
    assert vocab.entry(2).score == 9.0


def test_lookup_missing_is_none():
    """Unknown text has no id."""
    vocab = Vocabulary.from_entries({"a": 0.0})
    assert vocab.lookup("z") is None
    assert "z" not in vocab
    assert "a" in vocab


@pytest.mark.parametrize("index", [-1, 2, 100])
def test_entry_out_of_range(index):
    """Out-of-range ids raise an index error."""
    vocab = Vocabulary.from_entries({"a": 0.0, "b": 0.0})
    with pytest.raises(TokenIdError):
        vocab.entry(index)
    with pytest.raises(IndexError):
        vocab.entry(index)


def test_frozen_vocabulary_rejects_additions():
    """add_entry after freeze raises VocabularyError."""
    vocab = Vocabulary.from_entries({"a": 0.0})
    assert vocab.frozen
    with pytest.raises(VocabularyError):
        vocab.add_entry("b", 1.0)


def test_granularity_type_is_enforced():
    """A char vocabulary refuses bytes and vice versa."""
    with pytest.raises(VocabularyError):
        Vocabulary(granularity=Granularity.CHAR).add_entry(b"a", 0.0)
    with pytest.raises(VocabularyError):
        Vocabulary(granularity=Granularity.BYTE).add_entry("a", 0.0)


def test_from_entries_infers_granularity():
    """Bytes texts give a byte vocabulary, str texts a char vocabulary."""
    byte_vocab = Vocabulary.from_entries(
        [(b"a", 0.0), (b"b", 1.0)], order=ScoreOrder.ASCENDING
    )
    assert byte_vocab.granularity is Granularity.BYTE
    assert byte_vocab.order is ScoreOrder.ASCENDING
    assert Vocabulary.from_entries({"a": 0.0}).granularity is Granularity.CHAR
    assert [e.text for e in byte_vocab] == [b"a", b"b"]
