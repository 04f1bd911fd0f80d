"""Runnable evaluation suite for the seeded Bloom filter.

Run with::

    python -m bf_seeded.evaluation

Reports, for each base hash:

1. The demonstration scenario (100000 bits, 3 hash functions, a few fruit
   names and one long repetitive string)
2. Membership on a deterministic 80/20 split of synthetic keys (should be all present)
3. Empirical false positive rate on the held-out 20%, next to the theoretical estimate
4. Filter properties and memory usage
5. Insertion and query throughput
6. An overloaded filter (10 bits, 5 hash functions, 50 items) for comparison
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .bloom_filter import SEEDINGS, BloomFilter
from .hashing import HASHERS

DEMO_SIZE = 100000
DEMO_HASH_COUNT = 3
NUM_HASHES = 7
BITS_PER_ITEM = 10
_ALNUM = "AaBbCcDdEeFfGgHhIiJjKkLlMmNnOoPpQqRrSsTtUuVvWwXxYyZz0123456789"
LONG_ITEM = _ALNUM * 3 + _ALNUM[:42]

logger = logging.getLogger(__name__)


def run_demo(hasher: str = "murmur3", seeding: str = "additive") -> Dict[str, bool]:
    """Insert the demo items and report membership of a few probes."""
    print(f"DEMO: {DEMO_SIZE} bits, {DEMO_HASH_COUNT} hash functions")
    bloom = BloomFilter(DEMO_SIZE, DEMO_HASH_COUNT, hasher=hasher, seeding=seeding)
    bloom.update(["apple", "banana", "orange", LONG_ITEM])

    probes = {
        "apple": "apple",
        "banana": "banana",
        "grape": "grape",
        "long item": LONG_ITEM,
        "long item + 'a'": LONG_ITEM + "a",
    }
    results = {label: bloom.might_contain(item) for label, item in probes.items()}
    for label, present in results.items():
        print(f"  might_contain({label}): {present}")
    print()
    return results


def generate_synthetic_data(n: int = 100_000, seed: Optional[int] = None) -> List[str]:
    """Generate ``n`` unique keys.

    With a ``seed`` the keys are reproducible; otherwise random UUIDs are used.
    """
    if seed is None:
        return [str(uuid.uuid4()) for _ in range(n)]
    return [f"key-{seed}-{i}" for i in range(n)]


def build_split(
    words: List[str],
    *,
    hasher: str = "murmur3",
    seeding: str = "additive",
    num_hashes: int = NUM_HASHES,
    bits_per_item: int = BITS_PER_ITEM,
) -> Tuple[BloomFilter, List[str], List[str]]:
    """Create a deterministic 80/20 split and build the filter from the 80%.

    Returns (bloom_filter, training_words, test_words).
    """
    split = int(len(words) * 0.8)
    train = words[:split]
    test = words[split:]

    filter_size = max(1, len(train) * bits_per_item)
    bloom = BloomFilter(size=filter_size, hash_count=num_hashes, hasher=hasher, seeding=seeding)
    bloom.update(train)

    return bloom, train, test


def check_membership(bloom: BloomFilter, train: List[str]) -> int:
    """Verify all training items are present; return the number missing."""
    print("TEST A: Membership on training set")
    missing = [w for w in train if w not in bloom]
    print(f"  Training items: {len(train)}")
    print(f"  Missing after insertion: {len(missing)} (expected 0)")
    if missing:
        print(f"  Example missing: {missing[:5]}")
    print()
    return len(missing)


def measure_false_positive_rate(bloom: BloomFilter, train: List[str], test: List[str]) -> Dict[str, float]:
    """Measure the empirical false positive rate on held-out items."""
    print("TEST B: False positive rate on held-out items")
    train_set = set(train)
    held_out = [w for w in test if w not in train_set]

    expected = bloom.estimate_false_positive_rate()
    if not held_out:
        print("  No held-out items available for testing.")
        return {"held_out": 0, "false_positives": 0, "empirical": 0.0, "expected": expected}

    false_positives = sum(1 for w in held_out if w in bloom)
    fpr = false_positives / len(held_out)

    print(f"  Held-out items: {len(held_out)}")
    print(f"  False positives: {false_positives}")
    print(f"  Empirical FPR: {fpr:.6f} ({fpr*100:.4f}%)")
    note = " (assumes independent positions; additive seeding runs higher)" if bloom.seeding == "additive" else ""
    print(f"  Expected FPR:  {expected:.6f} ({expected*100:.4f}%){note}")
    print()
    return {"held_out": len(held_out), "false_positives": false_positives, "empirical": fpr, "expected": expected}


def show_properties(bloom: BloomFilter, train: List[str]) -> Dict[str, Any]:
    """Display filter memory and configuration properties."""
    print("TEST C: Filter properties")
    bytes_len = len(bloom.bit_array)
    mb = bytes_len / (1024 * 1024)
    per_item = bytes_len / len(train) if train else 0.0

    print(f"  Filter size (bits): {bloom.size}")
    print(f"  Filter size (bytes): {bytes_len}")
    print(f"  Filter size (MB): {mb:.2f}")
    print(f"  Number of hash functions: {bloom.hash_count}")
    print(f"  Base hash: {bloom.hasher} ({bloom.seeding})")
    print(f"  Items inserted: {len(train)}")
    print(f"  Bytes per item: {per_item:.4f}")
    print(f"  Fill ratio: {bloom.fill_ratio:.2%}")
    print()
    return {"size": bloom.size, "bytes": bytes_len, "fill_ratio": bloom.fill_ratio}


def measure_performance(bloom: BloomFilter, train: List[str], test: List[str], target_ops: int = 1_000_000) -> Dict[str, float]:
    """Measure insertion and query throughput (ops/sec) on a fresh filter."""
    print("TEST D: Performance benchmarking")
    bench_filter = BloomFilter(bloom.size, bloom.hash_count, hasher=bloom.hasher, seeding=bloom.seeding)

    start_time = time.perf_counter()
    for word in train:
        bench_filter.add(word)
    insert_time = time.perf_counter() - start_time
    insert_ops = len(train) / insert_time if insert_time > 0 else float("inf")
    print(f"    - Inserted {len(train)} items in {insert_time:.4f} sec")
    print(f"    - Insertion throughput: {insert_ops:,.0f} ops/sec")

    queries = test or train
    repeats = (target_ops // max(1, len(queries))) + 1
    query_set = (queries * repeats)[:target_ops]

    start_time = time.perf_counter()
    for word in query_set:
        _ = word in bench_filter
    query_time = time.perf_counter() - start_time
    query_ops = len(query_set) / query_time if query_time > 0 else float("inf")
    print(f"    - Performed {len(query_set)} queries in {query_time:.4f} sec")
    print(f"    - Query throughput: {query_ops:,.0f} ops/sec")
    print()

    return {
        "insert_count": len(train),
        "insert_time": insert_time,
        "insert_ops_per_sec": insert_ops,
        "query_count": len(query_set),
        "query_time": query_time,
        "query_ops_per_sec": query_ops,
    }


def run_overloaded(hasher: str = "murmur3", seeding: str = "additive", probes: int = 10_000) -> Dict[str, float]:
    """Overfill a tiny filter and report how often unseen keys look present."""
    print("TEST E: Overloaded filter (10 bits, 5 hash functions, 50 items)")
    bloom = BloomFilter(10, 5, hasher=hasher, seeding=seeding)
    bloom.update(f"item-{i}" for i in range(50))
    false_positives = sum(1 for i in range(probes) if f"probe-{i}" in bloom)
    fpr = false_positives / probes

    print(f"  Bits set: {bloom.bits_set}/{bloom.size}")
    print(f"  Empirical FPR: {fpr:.4f}")
    print()
    return {"bits_set": bloom.bits_set, "fill_ratio": bloom.fill_ratio, "empirical": fpr}


def run_all(
    n: int = 100_000,
    seed: Optional[int] = None,
    target_ops: int = 1_000_000,
) -> Dict[str, Dict[str, Any]]:
    """Run the whole suite for every base hash and seeding.

    Returns the measurements keyed by ``"<hasher>/<seeding>"``.
    """
    words = generate_synthetic_data(n, seed=seed)
    print(f"Dataset unique keys: {len(words)}")

    report: Dict[str, Dict[str, Any]] = {}
    for hasher in sorted(HASHERS):
        for seeding in SEEDINGS:
            print("=" * 60)
            print(f"Running Bloom filter evaluation with {hasher}/{seeding} (80/20 split)")
            print("=" * 60)
            print()
            logger.info("evaluating hasher=%s seeding=%s over %d keys", hasher, seeding, len(words))

            bloom, train, test = build_split(words, hasher=hasher, seeding=seeding)
            report[f"{hasher}/{seeding}"] = {
                "demo": run_demo(hasher, seeding),
                "missing": check_membership(bloom, train),
                "false_positives": measure_false_positive_rate(bloom, train, test),
                "properties": show_properties(bloom, train),
                "performance": measure_performance(bloom, train, test, target_ops),
                "overloaded": run_overloaded(hasher, seeding),
            }

    print("=" * 60)
    print("Evaluation completed.")
    print("=" * 60)
    return report


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_all()
