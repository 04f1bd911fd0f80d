"""Bloom filter with a seeded hash family.

The ``hash_count`` hash functions are derived from one base hash of the
element (MurmurHash3 via mmh3, or xxHash64) plus a distinct integer seed per
function::

    index(item, s) = (base_hash(item) + s) mod size,   s = 0 .. hash_count - 1

Python's ``%`` is a floored modulo, so the index always falls in
``[0, size)`` even when ``base_hash(item) + s`` is negative.

The additive family places an element's ``hash_count`` bits next to each
other, so its false positive rate sits well above the textbook
``(1 - e^(-kn/m))^k``. With ``seeding="keyed"`` each seed instead keys the base
hash itself::

    index(item, s) = base_hash(item, seed=hash_seed + s) mod size

which gives independent positions and matches the textbook estimate.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List

from .errors import InvalidConfigurationError
from .hashing import DEFAULT_HASHER, HASHERS, MAX_HASH_SEED, signature
from .sizing import false_positive_probability, optimal_hash_count, optimal_size

logger = logging.getLogger(__name__)

SEEDINGS = ("additive", "keyed")


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive")


class BloomFilter:
    """Fixed-size Bloom filter backed by a bytearray bitset.

    ``might_contain`` never returns False for an element that was added.
    It may return True for an element that was not.

    The filter does no locking. Concurrent ``might_contain`` calls are safe.
    Concurrent ``add`` calls must be serialized by the caller because eight
    bits share a byte and setting one is a read-modify-write.
    """

    __slots__ = (
        "size",
        "hash_count",
        "hash_seeds",
        "hasher",
        "hash_seed",
        "seeding",
        "items_added",
        "_hash",
        "_bit_array",
    )

    def __init__(
        self,
        size: int,
        hash_count: int,
        *,
        hasher: str = DEFAULT_HASHER,
        hash_seed: int = 0,
        seeding: str = "additive",
    ) -> None:
        """Initialize a Bloom filter.

        Args:
            size: Number of bits in the filter.
            hash_count: Number of hash functions to use.
            hasher: Name of the base hash, ``"murmur3"`` or ``"xxh64"``.
            hash_seed: Seed passed to the base hash (default 0).
            seeding: ``"additive"`` adds each seed to one base hash,
                ``"keyed"`` hashes once per seed.

        Raises:
            InvalidConfigurationError: If size or hash_count is not a positive
                integer, or the hasher or hash_seed is unusable.
        """
        _require_positive_int("size", size)
        _require_positive_int("hash_count", hash_count)
        if hasher not in HASHERS:
            raise InvalidConfigurationError(
                f"unknown hasher {hasher!r}, expected one of {sorted(HASHERS)}"
            )
        if isinstance(hash_seed, bool) or not isinstance(hash_seed, int):
            raise InvalidConfigurationError("hash_seed must be an integer")
        if not 0 <= hash_seed <= MAX_HASH_SEED:
            raise InvalidConfigurationError(f"hash_seed must be in [0, {MAX_HASH_SEED}]")
        if seeding not in SEEDINGS:
            raise InvalidConfigurationError(f"unknown seeding {seeding!r}, expected one of {list(SEEDINGS)}")

        self.size = size
        self.hash_count = hash_count
        self.hash_seeds = tuple(range(hash_count))
        self.hasher = hasher
        self.hash_seed = hash_seed
        self.seeding = seeding
        self.items_added = 0
        self._hash = HASHERS[hasher]
        self._bit_array = bytearray((size + 7) // 8)
        logger.debug(
            "created bloom filter size=%d hash_count=%d hasher=%s seeding=%s",
            size, hash_count, hasher, seeding,
        )

    @classmethod
    def create_optimal(cls, expected_elements: int, fp_rate: float, **kwargs: Any) -> "BloomFilter":
        """Create a filter sized for ``expected_elements`` at ``fp_rate``."""
        size = optimal_size(expected_elements, fp_rate)
        return cls(size, optimal_hash_count(size, expected_elements), **kwargs)

    def add(self, item: Any) -> None:
        """Insert ``item`` into the filter."""
        # Indices are computed before any bit is written.
        for bit_index in self.bit_indices(item):
            self._bit_array[bit_index >> 3] |= 1 << (bit_index & 7)
        self.items_added += 1

    def update(self, items: Iterable[Any]) -> None:
        """Insert all ``items`` into the filter."""
        for item in items:
            self.add(item)

    def might_contain(self, item: Any) -> bool:
        """Return False if ``item`` is definitely absent, True if it may be present."""
        for bit_index in self._hashes(item):
            if not (self._bit_array[bit_index >> 3] & (1 << (bit_index & 7))):
                return False
        return True

    def __contains__(self, item: Any) -> bool:
        return self.might_contain(item)

    def bit_indices(self, item: Any) -> List[int]:
        """Return the bit index for each seed, in seed order."""
        return list(self._hashes(item))

    def _hashes(self, item: Any) -> Iterator[int]:
        data = signature(item)
        if self.seeding == "keyed":
            for seed in self.hash_seeds:
                yield self._hash(data, (self.hash_seed + seed) & MAX_HASH_SEED) % self.size
            return

        base = self._hash(data, self.hash_seed)
        for seed in self.hash_seeds:
            yield (base + seed) % self.size

    @property
    def bit_array(self) -> bytearray:
        """Expose the underlying bit array for inspection."""
        return self._bit_array

    @property
    def bits_set(self) -> int:
        """Number of bits currently set."""
        return sum(bin(byte).count("1") for byte in self._bit_array)

    @property
    def fill_ratio(self) -> float:
        return self.bits_set / self.size

    def estimate_false_positive_rate(self) -> float:
        """Estimate the current false positive rate from ``items_added``.

        Repeated adds of one element are counted each time, so the estimate
        is an upper bound when duplicates were inserted. It assumes independent
        bit positions, which holds for ``seeding="keyed"`` only; the additive
        family runs higher.
        """
        return false_positive_probability(self.size, self.hash_count, self.items_added)

    def __len__(self) -> int:
        return self.items_added

    def __repr__(self) -> str:
        return (
            f"BloomFilter(size={self.size}, hash_count={self.hash_count}, "
            f"hasher={self.hasher!r}, seeding={self.seeding!r}, items={self.items_added}, fill_ratio={self.fill_ratio:.2%})"
        )
