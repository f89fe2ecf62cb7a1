from .position_index import PositionIndex
from .indexed_heap import IndexedMaxHeap
from .uid import MAX_UID, UID_BITS, PrioritizedItem, Uid, is_valid_uid, uid_of

__all__ = [
    "PositionIndex",
    "IndexedMaxHeap",
    "PrioritizedItem",
    "Uid",
    "uid_of",
    "is_valid_uid",
    "UID_BITS",
    "MAX_UID",
]
