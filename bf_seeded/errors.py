"""Exceptions raised by the seeded Bloom filter."""
from __future__ import annotations


class BloomFilterError(Exception):
    """Base class for Bloom filter errors."""


class InvalidConfigurationError(BloomFilterError, ValueError):
    """Raised when a filter is configured with unusable parameters."""


class UnhashableElementError(BloomFilterError, TypeError):
    """Raised when an element cannot produce a hash signature."""
