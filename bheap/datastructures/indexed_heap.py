from __future__ import annotations
import logging
from typing import Generic, Iterable, Iterator, List, Optional, TypeVar, Union

from .position_index import PositionIndex
from .uid import UidFunc, is_valid_uid, uid_of

T = TypeVar("T")

logger = logging.getLogger(__name__)


class IndexedMaxHeap(Generic[T]):
    """A binary max-heap whose elements can be re-prioritized in place.

    Alongside the array-backed tree the heap keeps a :class:`PositionIndex`
    from each element's uid to its current slot. Both are updated together by
    every mutating operation, so after any public call:

    - ``buffer[i] >= buffer[c]`` for every child slot ``c`` of ``i``;
    - ``index[uid(buffer[i])] == i`` for every slot, with no stale entries.

    Changing an element's priority is a two-step affair: mutate the object
    obtained from :meth:`get_mut` (or held elsewhere), then call
    :meth:`restore_at` with its slot or :meth:`reprioritize` with its uid.

    Preconditions (not checked): an element's uid never changes while it is
    in the heap, and no two live elements share a uid. The heap does no
    locking; share it between threads only under an external lock.
    """

    __slots__ = ("_data", "_index", "_uid")

    def __init__(self, it: Optional[Iterable[T]] = None, *, uid: Optional[UidFunc] = None) -> None:
        self._uid: Optional[UidFunc] = uid
        self._data: List[T] = []
        self._index = PositionIndex()
        if it is not None:
            self._data = list(it)
            if self._data:
                self._build()  # O(n) instead of n pushes

    @classmethod
    def from_iterable(cls, it: Iterable[T], *, uid: Optional[UidFunc] = None) -> "IndexedMaxHeap[T]":
        """Adopt *it* in the given order and heapify it in linear time."""
        return cls(it, uid=uid)

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _uid_of(self, elem: T) -> int:
        return uid_of(elem, self._uid)

    def _swap(self, i: int, j: int) -> None:
        """Exchange slots *i* and *j* in the buffer and the index together."""
        data = self._data
        self._index.set(self._uid_of(data[i]), j)
        self._index.set(self._uid_of(data[j]), i)
        data[i], data[j] = data[j], data[i]

    def _sift_up(self, idx: int) -> Optional[int]:
        data = self._data
        i = idx
        while i > 0:
            parent = (i - 1) // 2
            if not data[i] > data[parent]:
                break
            self._swap(i, parent)
            i = parent
        return i if i != idx else None

    def _sift_down(self, idx: int) -> Optional[int]:
        data = self._data
        n = len(data)
        i = idx
        while True:
            left = 2 * i + 1
            if left >= n:
                break
            right = left + 1
            largest = i
            # strict > keeps the left child on ties
            if data[left] > data[largest]:
                largest = left
            if right < n and data[right] > data[largest]:
                largest = right
            if largest == i:
                break
            self._swap(i, largest)
            i = largest
        return i if i != idx else None

    def _build(self) -> None:
        """Index every slot, then sift down from the last parent to the root."""
        data = self._data
        self._index.clear()
        self._index.bulk_set((self._uid_of(e), i) for i, e in enumerate(data))
        for i in reversed(range(len(data) // 2)):
            self._sift_down(i)
        logger.debug("built heap of %d elements", len(data))

    def _position_of_key(self, key: Union[int, T]) -> Optional[int]:
        if isinstance(key, int):
            return self.position_of(key)
        return self.position_of_element(key)

    # -----------------------------
    # Queries
    # -----------------------------
    def is_empty(self) -> bool:
        return not self._data

    def peek(self) -> Optional[T]:
        """Return the largest item without removing it (O(1))."""
        return self._data[0] if self._data else None

    def position_of(self, uid: int) -> Optional[int]:
        """Slot of the live element with this uid, or None (O(1) average)."""
        return self._index.get(uid)

    def position_of_element(self, elem: T) -> Optional[int]:
        return self._index.get(self._uid_of(elem))

    def get_mut(self, slot: int) -> Optional[T]:
        """Return the element stored at *slot* so the caller can change it.

        Only the fields that affect ordering may be changed, and the caller
        must then call ``restore_at(slot)``. Negative slots are out of range.
        """
        if 0 <= slot < len(self._data):
            return self._data[slot]
        return None

    # -----------------------------
    # Public API
    # -----------------------------
    def push(self, item: T) -> None:
        """Push item onto the heap (O(log n))."""
        uid = self._uid_of(item)
        slot = len(self._data)
        self._data.append(item)
        self._index.set(uid, slot)
        self._sift_up(slot)

    def pop(self) -> Optional[T]:
        """Pop and return the largest item, or None if empty (O(log n))."""
        data = self._data
        if not data:
            return None
        top = data[0]
        last = data.pop()
        self._index.delete(self._uid_of(top))
        if data:
            data[0] = last
            self._index.set(self._uid_of(last), 0)
            self._sift_down(0)
        return top

    def restore_at(self, slot: int) -> Optional[int]:
        """Restore heap order around the element at *slot*.

        Tries sifting up first and only sifts down if the element stayed put.
        Returns the slot the element moved to, or None if it did not move or
        *slot* is out of range.
        """
        if not 0 <= slot < len(self._data):
            return None
        moved = self._sift_up(slot)
        if moved is None:
            moved = self._sift_down(slot)
        return moved

    def reprioritize(self, key: Union[int, T]) -> Optional[int]:
        """``restore_at`` for the element identified by *key*.

        *key* is either a uid (any ``int``) or an element whose uid is looked
        up. Returns None if no live element has that uid.
        """
        slot = self._position_of_key(key)
        if slot is None:
            return None
        return self.restore_at(slot)

    def remove(self, key: Union[int, T]) -> Optional[T]:
        """Remove and return the element identified by *key* (O(log n))."""
        slot = self._position_of_key(key)
        if slot is None:
            return None
        data = self._data
        last = len(data) - 1
        if slot != last:
            self._swap(slot, last)
        item = data.pop()
        self._index.delete(self._uid_of(item))
        if slot < len(data):
            self.restore_at(slot)
        return item

    def replace(self, item: T) -> Optional[T]:
        """Pop the largest item and push *item* with a single sift.

        On an empty heap *item* is simply pushed and None is returned.
        """
        data = self._data
        if not data:
            self.push(item)
            return None
        uid = self._uid_of(item)
        top = data[0]
        self._index.delete(self._uid_of(top))
        data[0] = item
        self._index.set(uid, 0)
        self._sift_down(0)
        return top

    def pushpop(self, item: T) -> T:
        """Push item then pop largest in a single O(log n) operation."""
        data = self._data
        if data and data[0] > item:
            uid = self._uid_of(item)
            top = data[0]
            self._index.delete(self._uid_of(top))
            data[0] = item
            self._index.set(uid, 0)
            self._sift_down(0)
            return top
        return item

    def heapify(self) -> None:
        """Rebuild both invariants in O(n), e.g. after many priority changes."""
        self._build()

    def clear(self) -> None:
        self._data.clear()
        self._index.clear()
        logger.debug("cleared heap")

    # -----------------------------
    # Diagnostics
    # -----------------------------
    def is_heap_ordered(self) -> bool:
        """True if no child compares greater than its parent. O(n)."""
        data = self._data
        return all(not data[c] > data[(c - 1) // 2] for c in range(1, len(data)))

    def is_index_consistent(self) -> bool:
        """True if every slot is indexed correctly and nothing else is. O(n).

        Also false if any uid falls outside the unsigned 64-bit range.
        """
        if len(self._index) != len(self._data):
            return False
        for i, e in enumerate(self._data):
            uid = self._uid_of(e)
            if not is_valid_uid(uid) or self._index.get(uid) != i:
                return False
        return True

    # -----------------------------
    # Standard magic methods
    # -----------------------------
    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:  # pragma: no cover - trivial
        return bool(self._data)

    def __contains__(self, item: T) -> bool:
        return self.position_of_element(item) is not None

    def to_list(self) -> List[T]:  # pragma: no cover - trivial
        return list(self._data)

    def __iter__(self) -> Iterator[T]:  # pragma: no cover - simple
        # Iterate over the internal array (heap order, not sorted order)
        return iter(self._data)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"IndexedMaxHeap({self._data!r})"
