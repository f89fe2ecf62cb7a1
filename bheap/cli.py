"""
Indexed heap command-line demo.

Exercises the indexed max-heap from the shell: heap-sorting integers,
draining named items in priority order, and changing priorities of items
that are already in the heap.

Usage examples:
    python -m bheap.cli sort 1 7 2 5 10 9
    python -m bheap.cli drain build=3 test=5 deploy=1
    python -m bheap.cli reprioritize build=3 test=5 deploy=1 --set deploy=9
    python -m bheap.cli --log-level DEBUG reprioritize a=1 b=2 --set a=5 --set b=0
"""

import argparse
import logging
import math
import sys

from . import settings
from .datastructures import IndexedMaxHeap, PrioritizedItem

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Argument parsing helpers
# -------------------------------------------------------------------
def named_priority(token):
    """Parse a ``NAME=PRIORITY`` token into ``(name, float)``."""
    name, sep, value = token.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=PRIORITY, got {token!r}")
    try:
        priority = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"priority of {name!r} is not a number: {value!r}")
    if math.isnan(priority):
        raise argparse.ArgumentTypeError(f"priority of {name!r} must not be NaN")
    return name, priority


def build_items(pairs):
    """Turn parsed pairs into PrioritizedItems with sequential uids.

    Returns None if a name repeats.
    """
    seen = set()
    items = []
    for uid, (name, priority) in enumerate(pairs):
        if name in seen:
            return None
        seen.add(name)
        items.append(PrioritizedItem(uid, priority, payload=name))
    return items


def print_drained(heap):
    """Pop everything from *heap*, printing one ranked line per item."""
    rank = 1
    while heap:
        item = heap.pop()
        print(f"{rank}. {item.payload} {item.priority:g}")
        rank += 1


# -------------------------------------------------------------------
# Command handlers
# -------------------------------------------------------------------
def cmd_sort(args):
    """Heap-sort integers in descending order."""
    # uids are argument positions; the values may repeat or be negative
    heap = IndexedMaxHeap(PrioritizedItem(i, v) for i, v in enumerate(args.values))
    logger.info("sorting %d values", len(heap))
    out = []
    while heap:
        out.append(heap.pop().priority)
    print(" ".join(str(v) for v in out))
    return 0


def cmd_drain(args):
    """Print named items highest priority first."""
    items = build_items(args.items)
    if items is None:
        args.parser.error("item names must be unique")
    heap = IndexedMaxHeap(items)
    logger.info("draining %d items", len(heap))
    print_drained(heap)
    return 0


def cmd_reprioritize(args):
    """Change priorities of queued items in place, then drain the heap."""
    items = build_items(args.items)
    if items is None:
        args.parser.error("item names must be unique")
    by_name = {item.payload: item.uid() for item in items}
    heap = IndexedMaxHeap(items)

    for name, priority in args.updates:
        uid = by_name.get(name)
        if uid is None:
            print(f"Unknown item: {name}", file=sys.stderr)
            return 1
        slot = heap.position_of(uid)
        heap.get_mut(slot).priority = priority
        moved = heap.restore_at(slot)
        logger.info("%s -> %g: slot %d moved to %s", name, priority, slot, moved)

    print_drained(heap)
    return 0


# -------------------------------------------------------------------
# CLI parser setup
# -------------------------------------------------------------------
def build_parser():
    """Build the argparse command-line parser with subcommands."""
    p = argparse.ArgumentParser(prog="python -m bheap.cli", description="Indexed max-heap demo CLI")
    p.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("sort", help="Heap-sort integers, largest first")
    s.add_argument("values", nargs="+", type=int)
    s.set_defaults(func=cmd_sort, parser=s)

    s = sub.add_parser("drain", help="Pop named items in priority order")
    s.add_argument("items", nargs="+", type=named_priority, metavar="NAME=PRIORITY")
    s.set_defaults(func=cmd_drain, parser=s)

    s = sub.add_parser("reprioritize", help="Change priorities in place, then drain")
    s.add_argument("items", nargs="+", type=named_priority, metavar="NAME=PRIORITY")
    s.add_argument(
        "--set",
        dest="updates",
        action="append",
        required=True,
        type=named_priority,
        metavar="NAME=PRIORITY",
    )
    s.set_defaults(func=cmd_reprioritize, parser=s)

    return p


# -------------------------------------------------------------------
# Entry point
# -------------------------------------------------------------------
def main(argv=None):
    """CLI entry point when invoked via `python -m bheap.cli`."""
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(format=settings.LOG_FORMAT)
    logging.getLogger().setLevel(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
