"""Element identity for the indexed heap.

Every element stored in an :class:`~bheap.datastructures.IndexedMaxHeap`
must be orderable and must carry a stable 64-bit identity. The identity is
what lets the heap find an element's slot without scanning the buffer.

Two ways of supplying it:
- implement ``uid()`` on the element type (the :class:`Uid` protocol), or
- pass a ``uid=`` callable when constructing the heap, for types such as
  ``int`` that cannot grow a method.

``hash()`` is deliberately not used as a fallback: two distinct elements with
colliding hashes would silently share an index entry.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, Protocol, runtime_checkable

UID_BITS = 64
MAX_UID = (1 << UID_BITS) - 1

UidFunc = Callable[[Any], int]


@runtime_checkable
class Uid(Protocol):
    """Anything exposing a stable unsigned 64-bit identity."""

    def uid(self) -> int: ...


def uid_of(elem: Any, uid: Optional[UidFunc] = None) -> int:
    """Return the identity of *elem*.

    Uses the explicit *uid* callable when given, otherwise ``elem.uid()``.

    Raises:
        TypeError: if *elem* has no ``uid()`` method and no callable was given.
    """
    if uid is not None:
        return uid(elem)
    if not isinstance(elem, Uid):
        raise TypeError(
            f"{type(elem).__name__!r} has no uid() method; "
            "pass uid=<callable> to the heap"
        )
    return elem.uid()


def is_valid_uid(value: int) -> bool:
    """True if *value* fits the unsigned 64-bit identity space."""
    return isinstance(value, int) and 0 <= value <= MAX_UID


@functools.total_ordering
class PrioritizedItem:
    """A ready-made heap element: ``uid`` + mutable ``priority`` + ``payload``.

    Items compare by ``priority`` only. ``uid`` must stay fixed while the item
    is in a heap; ``priority`` may change as long as the owner calls
    ``restore_at``/``reprioritize`` afterwards.
    """

    __slots__ = ("_uid", "priority", "payload")

    def __init__(self, uid: int, priority: Any, payload: Any = None) -> None:
        self._uid = uid
        self.priority = priority
        self.payload = payload

    def uid(self) -> int:
        return self._uid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrioritizedItem):
            return NotImplemented
        return self.priority == other.priority

    def __lt__(self, other: "PrioritizedItem") -> bool:
        if not isinstance(other, PrioritizedItem):
            return NotImplemented
        return self.priority < other.priority

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"PrioritizedItem(uid={self._uid}, priority={self.priority!r}, payload={self.payload!r})"
