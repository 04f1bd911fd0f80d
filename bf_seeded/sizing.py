"""Bloom filter sizing math.

After inserting ``n`` elements with ``k`` hash functions into ``m`` bits, the
probability that a never-inserted element is reported present is roughly::

    (1 - e^(-k n / m)) ^ k

The optimal parameters for ``n`` expected elements and a target rate ``p`` are::

    m = -(n * ln(p)) / (ln(2) ^ 2)
    k = (m / n) * ln(2)
"""
from __future__ import annotations

import math

from .errors import InvalidConfigurationError


def false_positive_probability(size: int, hash_count: int, n: int) -> float:
    """Return the expected false positive rate for the given load."""
    if size <= 0:
        raise InvalidConfigurationError("size must be positive")
    if hash_count <= 0:
        raise InvalidConfigurationError("hash_count must be positive")
    if n < 0:
        raise InvalidConfigurationError("n must not be negative")
    if n == 0:
        return 0.0
    return (1.0 - math.exp(-hash_count * n / size)) ** hash_count


def optimal_size(expected_elements: int, fp_rate: float) -> int:
    """Return the number of bits needed for ``expected_elements`` at ``fp_rate``."""
    if expected_elements <= 0:
        raise InvalidConfigurationError("expected_elements must be positive")
    if not (0 < fp_rate < 1):
        raise InvalidConfigurationError("fp_rate must be in (0, 1)")
    return max(1, math.ceil(-expected_elements * math.log(fp_rate) / (math.log(2) ** 2)))


def optimal_hash_count(size: int, expected_elements: int) -> int:
    """Return the hash function count minimizing false positives."""
    if size <= 0:
        raise InvalidConfigurationError("size must be positive")
    if expected_elements <= 0:
        raise InvalidConfigurationError("expected_elements must be positive")
    return max(1, round((size / expected_elements) * math.log(2)))


def bits_per_item(fp_rate: float) -> float:
    """Bits per element needed for ``fp_rate``: ``-ln(p) / ln(2)^2``."""
    if not (0 < fp_rate < 1):
        raise InvalidConfigurationError("fp_rate must be in (0, 1)")
    return -math.log(fp_rate) / (math.log(2) ** 2)
