from __future__ import annotations
from typing import Iterable, Iterator, Optional, Tuple

from .. import settings


class _Entry:
    """A chain node mapping one uid to its buffer slot."""

    __slots__ = ("uid", "slot", "next")

    def __init__(self, uid: int, slot: int, next: Optional["_Entry"] = None) -> None:
        self.uid = uid
        self.slot = slot
        self.next = next


class PositionIndex:
    """Separate-chaining hash table from 64-bit uid to heap buffer slot.

    Keys are non-negative ints and values are slots, so the table never stores
    element references. Capacity is always a power of two and buckets are
    created lazily.
    """

    __slots__ = ("_cap", "_load", "_buckets", "_size")

    def __init__(
        self,
        capacity: int = settings.INDEX_INITIAL_CAPACITY,
        load_factor: float = settings.INDEX_LOAD_FACTOR,
    ) -> None:
        if not (0.1 <= load_factor < 1.0):
            raise ValueError("load_factor must be in [0.1, 1.0)")
        cap = 4
        while cap < capacity:
            cap *= 2
        self._cap: int = cap
        self._load: float = load_factor
        self._buckets: list[Optional[_Entry]] = [None] * self._cap
        self._size: int = 0

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _bucket_index(self, uid: int) -> int:
        # fold the high half in so uids differing only above bit 32 spread out
        return (uid ^ (uid >> 32)) & (self._cap - 1)

    def _find(self, uid: int) -> Optional[_Entry]:
        e = self._buckets[self._bucket_index(uid)]
        while e is not None:
            if e.uid == uid:
                return e
            e = e.next
        return None

    def _grow_to(self, new_cap: int) -> None:
        """Rehash every entry into *new_cap* buckets, reusing the nodes."""
        old_buckets = self._buckets
        self._cap = new_cap
        self._buckets = [None] * self._cap
        for e in old_buckets:
            while e is not None:
                nxt = e.next
                idx = self._bucket_index(e.uid)
                e.next = self._buckets[idx]
                self._buckets[idx] = e
                e = nxt

    # -----------------------------
    # Core operations
    # -----------------------------
    def set(self, uid: int, slot: int) -> Optional[int]:
        """Map *uid* to *slot*; return the previous slot, or None if new."""
        e = self._find(uid)
        if e is not None:
            prev = e.slot
            e.slot = slot
            return prev
        idx = self._bucket_index(uid)
        self._buckets[idx] = _Entry(uid, slot, self._buckets[idx])
        self._size += 1
        if self._size / self._cap > self._load:
            self._grow_to(self._cap * 2)
        return None

    def get(self, uid: int) -> Optional[int]:
        """Slot recorded for *uid*, or None."""
        e = self._find(uid)
        return None if e is None else e.slot

    def contains(self, uid: int) -> bool:
        return self._find(uid) is not None

    def delete(self, uid: int) -> bool:
        """Remove *uid* if present; return True if it was removed."""
        idx = self._bucket_index(uid)
        prev: Optional[_Entry] = None
        cur = self._buckets[idx]
        while cur is not None:
            if cur.uid == uid:
                if prev is None:
                    self._buckets[idx] = cur.next
                else:
                    prev.next = cur.next
                self._size -= 1
                return True
            prev, cur = cur, cur.next
        return False

    def clear(self) -> None:
        """Drop all entries. Keeps capacity to avoid churn on re-use."""
        self._buckets = [None] * self._cap
        self._size = 0

    # -----------------------------
    # Bulk insertion
    # -----------------------------
    def bulk_set(self, pairs: Iterable[Tuple[int, int]]) -> None:
        """Insert many (uid, slot) pairs, sizing the table once up front."""
        if not isinstance(pairs, (list, tuple)):
            pairs = list(pairs)
        needed = int((self._size + len(pairs)) / self._load) + 1
        if needed > self._cap:
            cap = self._cap
            while cap < needed:
                cap *= 2
            self._grow_to(cap)
        for uid, slot in pairs:
            self.set(uid, slot)

    # -----------------------------
    # Iteration helpers
    # -----------------------------
    def items(self) -> Iterator[Tuple[int, int]]:
        for e in self._buckets:
            while e is not None:
                yield (e.uid, e.slot)
                e = e.next

    def keys(self) -> Iterator[int]:
        for uid, _ in self.items():
            yield uid

    @property
    def capacity(self) -> int:
        return self._cap

    def __contains__(self, uid: int) -> bool:
        return self._find(uid) is not None

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:  # pragma: no cover - simple
        return self.keys()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        pairs = ", ".join(f"{u}: {s}" for u, s in self.items())
        return f"PositionIndex({{{pairs}}})"
