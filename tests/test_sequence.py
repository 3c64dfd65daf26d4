"""Unit tests for the handle-addressed symbol sequence."""

import pytest

from mergetok._sequence import SymbolSequence
from mergetok.errors import HandleError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def seq():
    """Return a sequence holding 'a', 'b', 'c', 'd'."""
    s = SymbolSequence()
    for ch in "abcd":
        s.append(ch)
    return s


# Append and navigation
# ---------------------------------------------------------------------------


def test_handles_are_issued_in_order(seq):
    """Handles count up from zero in append order."""
    assert list(seq.handles()) == [0, 1, 2, 3]
    assert seq.head == 0
    assert len(seq) == 4


def test_neighbours_at_boundaries(seq):
    """prev of head and next of tail are None."""
    assert seq.prev(0) is None
    assert seq.next(3) is None
    assert seq.next(1) == 2
    assert seq.prev(2) == 1


def test_empty_sequence():
    """An empty sequence has no head and iterates to nothing."""
    s = SymbolSequence()
    assert s.head is None
    assert list(s) == []
    assert len(s) == 0


def test_set_replaces_content(seq):
    """set rewrites a node in place without changing its handle."""
    seq.set(1, "bc")
    assert seq.get(1) == "bc"
    assert list(seq) == ["a", "bc", "c", "d"]


# Removal
# ---------------------------------------------------------------------------


def test_remove_links_neighbours(seq):
    """Removing a middle node makes its neighbours adjacent."""
    seq.remove(2)
    assert seq.next(1) == 3
    assert seq.prev(3) == 1
    assert list(seq) == ["a", "b", "d"]
    assert len(seq) == 3


def test_remove_head_and_tail(seq):
    """Removing the ends moves head and tail."""
    seq.remove(0)
    seq.remove(3)
    assert seq.head == 1
    assert seq.prev(1) is None
    assert seq.next(2) is None
    assert list(seq) == ["b", "c"]


def test_remove_everything(seq):
    """A fully drained sequence is empty again."""
    for h in range(4):
        seq.remove(h)
    assert seq.head is None
    assert len(seq) == 0


def test_removed_handle_is_not_live(seq):
    """contains is False after removal and handles are never reissued."""
    seq.remove(1)
    assert not seq.contains(1)
    assert 1 not in seq
    assert seq.append("e") == 4


@pytest.mark.parametrize("op", ["get", "prev", "next", "remove"])
def test_dead_handle_raises(seq, op):
    """Any access through a removed handle raises HandleError."""
    seq.remove(2)
    with pytest.raises(HandleError):
        getattr(seq, op)(2)


def test_out_of_range_handle_raises(seq):
    """Handles never issued are rejected."""
    assert not seq.contains(-1)
    assert not seq.contains(99)
    with pytest.raises(HandleError):
        seq.set(99, "x")
    with pytest.raises(LookupError):
        seq.get(-1)
