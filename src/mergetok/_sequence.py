"""
Index-addressed doubly linked list of pieces used by the encode loop.

Nodes live in parallel arrays and are addressed by the integer handle
returned from :meth:`SymbolSequence.append`. Removal only unlinks a node,
so handles stay stable for the lifetime of the sequence and are never reused.
"""

from collections.abc import Iterator

from .errors import HandleError
from .types import Handle, Piece

# sentinel link for "no neighbour"
_NIL = -1


class SymbolSequence:
    """Append-only arena of pieces with O(1) unlink and neighbour lookup."""

    __slots__ = ("_content", "_prev", "_next", "_live", "_head", "_tail", "_n_live")

    def __init__(self) -> None:
        self._content: list[Piece] = []
        self._prev: list[int] = []
        self._next: list[int] = []
        self._live: list[bool] = []
        self._head = _NIL
        self._tail = _NIL
        self._n_live = 0

    def append(self, content: Piece) -> Handle:
        """Add a node after the current tail and return its handle."""
        handle = len(self._content)
        self._content.append(content)
        self._prev.append(self._tail)
        self._next.append(_NIL)
        self._live.append(True)
        if self._tail == _NIL:
            self._head = handle
        else:
            self._next[self._tail] = handle
        self._tail = handle
        self._n_live += 1
        return handle

    def contains(self, handle: Handle) -> bool:
        """True iff ``handle`` refers to a node that has not been removed."""
        return 0 <= handle < len(self._live) and self._live[handle]

    __contains__ = contains

    def get(self, handle: Handle) -> Piece:
        self._check(handle)
        return self._content[handle]

    def set(self, handle: Handle, content: Piece) -> None:
        self._check(handle)
        self._content[handle] = content

    def prev(self, handle: Handle) -> Handle | None:
        """Return the previous live node, or None at the start."""
        self._check(handle)
        p = self._prev[handle]
        return None if p == _NIL else p

    def next(self, handle: Handle) -> Handle | None:
        """Return the next live node, or None at the end."""
        self._check(handle)
        n = self._next[handle]
        return None if n == _NIL else n

    def remove(self, handle: Handle) -> None:
        """
        Unlink ``handle`` so its neighbours become adjacent.

        The slot is not reclaimed; the handle is permanently invalid afterwards.
        """
        self._check(handle)
        p, n = self._prev[handle], self._next[handle]
        if p == _NIL:
            self._head = n
        else:
            self._next[p] = n
        if n == _NIL:
            self._tail = p
        else:
            self._prev[n] = p
        self._live[handle] = False
        self._n_live -= 1

    @property
    def head(self) -> Handle | None:
        """First live node, or None if the sequence is empty."""
        return None if self._head == _NIL else self._head

    def handles(self) -> Iterator[Handle]:
        """Yield live handles from head to tail."""
        h = self._head
        while h != _NIL:
            yield h
            h = self._next[h]

    def __iter__(self) -> Iterator[Piece]:
        for h in self.handles():
            yield self._content[h]

    def __len__(self) -> int:
        return self._n_live

    def _check(self, handle: Handle) -> None:
        if not self.contains(handle):
            raise HandleError("sequence node is not live", handle=handle)
