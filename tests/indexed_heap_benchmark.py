"""Timing benchmark for IndexedMaxHeap; run directly, not collected by pytest.

    python tests/indexed_heap_benchmark.py
"""

import csv
import random
import statistics
import sys
import time

from bheap.datastructures import IndexedMaxHeap, PrioritizedItem

# ----------------------------
# Helper Functions
# ----------------------------

def generate_items(size: int):
    """Generate PrioritizedItems with random priorities and sequential uids."""
    return [PrioritizedItem(uid, random.randint(0, 1000000)) for uid in range(size)]

def measure_operation_time(operation, input_size: int, iterations: int = 5):
    """Time *operation* on fresh items; returns (mean, stdev) in ms.

    Item generation happens before the clock starts.
    """
    samples = [generate_items(input_size) for _ in range(iterations)]
    times = []
    for data in samples:
        start = time.perf_counter_ns()
        operation(data)
        times.append((time.perf_counter_ns() - start) / 1e6)
    return statistics.mean(times), (statistics.stdev(times) if iterations > 1 else 0.0)

def index_footprint(index):
    """Bytes held by a PositionIndex: bucket array plus every chain node."""
    total = sys.getsizeof(index._buckets)
    for entry in index._buckets:
        while entry is not None:
            total += sys.getsizeof(entry)
            entry = entry.next
    return total

def measure_space_efficiency(operation, input_size: int, iterations: int = 3):
    """Return (buffer bytes, index bytes) averaged over *iterations* runs.

    Elements themselves are excluded; the heap only adds the buffer list and
    its position index on top of them.
    """
    buffers, indexes = [], []
    for _ in range(iterations):
        heap = operation(generate_items(input_size))
        buffers.append(sys.getsizeof(heap) + sys.getsizeof(heap._data))
        indexes.append(index_footprint(heap._index))
    return statistics.mean(buffers), statistics.mean(indexes)


# ----------------------------
# Operations to Benchmark
# ----------------------------

def bench_build(data):
    return IndexedMaxHeap(data)

def bench_push(data):
    heap = IndexedMaxHeap()
    for item in data:
        heap.push(item)
    return heap

def bench_reprioritize(data):
    heap = IndexedMaxHeap(data)
    for item in random.sample(data, min(1000, len(data))):
        item.priority = random.randint(0, 1000000)
        heap.reprioritize(item)
    return heap

def bench_pop(data):
    heap = IndexedMaxHeap(data)
    while heap:
        heap.pop()
    return heap

# ----------------------------
# Benchmark Runner
# ----------------------------

def run_benchmarks(output_file: str, base_input: int = 100, steps: int = 10):
    """Time each operation at sizes doubling from *base_input*; write a CSV."""
    operations = {
        "build": bench_build,
        "push": bench_push,
        "reprioritize": bench_reprioritize,
        "pop": bench_pop,
    }
    header = ["n", "operation", "mean_ms", "stdev_ms", "buffer_bytes", "index_bytes"]

    with open(output_file, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(header)
        for op_name, op_func in operations.items():
            for size in (base_input << i for i in range(steps)):
                mean_ms, stdev_ms = measure_operation_time(op_func, size)
                buffer_bytes, index_bytes = measure_space_efficiency(op_func, size)
                writer.writerow([size, op_name, f"{mean_ms:.3f}", f"{stdev_ms:.3f}",
                                 f"{buffer_bytes:.0f}", f"{index_bytes:.0f}"])
                print(f"{op_name:<13} n={size:<8} {mean_ms:9.3f} ms ±{stdev_ms:.3f} | "
                      f"buffer {buffer_bytes:.0f} B | index {index_bytes:.0f} B")

    print(f"\nResults saved to {output_file}")

# ----------------------------
# Main Entry Point
# ----------------------------

if __name__ == "__main__":
    run_benchmarks("indexed_heap_performance.csv", base_input=100)
