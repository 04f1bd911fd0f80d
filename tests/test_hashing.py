"""Tests for element signatures and base hashes."""

from decimal import Decimal
from fractions import Fraction

import mmh3
import pytest
import xxhash

from bf_seeded.errors import BloomFilterError, UnhashableElementError
from bf_seeded.hashing import HASHERS, base_hash, signature


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __bloom_signature__(self):
        return ("Point", self.x, self.y)


class TestSignature:

    @pytest.mark.parametrize("left,right", [
        (1, 1.0),
        (1, True),
        (0, False),
        (0, -0.0),
        ((1, "a"), (1.0, "a")),
        (frozenset({1, 2, 3}), frozenset({3, 2, 1})),
        (b"abc", bytearray(b"abc")),
        (b"abc", memoryview(b"abc")),
        (1, Decimal(1)),
        (0.5, Fraction(1, 2)),
        (Decimal("2.0"), 2),
        (Decimal("0.5"), 0.5),
        (Fraction(6, 3), 2.0),
        (Decimal("0.1"), Fraction(1, 10)),
        (complex(3, 0), 3),
    ])
    def test_equal_values_share_a_signature(self, left, right):
        assert left == right
        assert signature(left) == signature(right)

    @pytest.mark.parametrize("left,right", [
        ("1", 1),
        ("abc", b"abc"),
        (1.5, 2.5),
        ((1, 2), (2, 1)),
        (("ab", "c"), ("a", "bc")),
        (255, -1),
        (2 ** 64, 0),
    ])
    def test_distinct_values_have_distinct_signatures(self, left, right):
        assert signature(left) != signature(right)

    def test_signature_is_deterministic(self):
        assert signature("hello") == signature("hello")
        assert signature("hello") == b"s" + "hello".encode("utf-8")

    def test_large_and_negative_integers(self):
        for value in (-1, -128, 127, 128, 2 ** 100, -(2 ** 100)):
            assert signature(value) == signature(value)
        assert len({signature(v) for v in (-1, -128, 127, 128)}) == 4

    def test_signature_hook(self):
        assert signature(Point(1, 2)) == signature(("Point", 1, 2))
        assert signature(Point(1, 2)) != signature(Point(2, 1))

    def test_plain_hashable_object_uses_hash(self):
        sentinel = object()
        assert signature(sentinel) == signature(sentinel)

    def test_none_is_rejected(self):
        with pytest.raises(UnhashableElementError, match="None"):
            signature(None)

    @pytest.mark.parametrize("item", [[1, 2], {"a": 1}, {1, 2}, (1, [2])])
    def test_unhashable_values_are_rejected(self, item):
        with pytest.raises(UnhashableElementError):
            signature(item)

    def test_unhashable_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            signature([])
        with pytest.raises(BloomFilterError):
            signature([])


class TestBaseHash:

    def test_murmur3_is_signed_32_bit(self):
        values = [base_hash(f"key-{i}", "murmur3") for i in range(200)]
        assert all(-(2 ** 31) <= v < 2 ** 31 for v in values)
        assert any(v < 0 for v in values)

    def test_murmur3_matches_mmh3(self):
        assert base_hash("apple", "murmur3", 7) == mmh3.hash(signature("apple"), 7, signed=True)

    def test_xxh64_matches_xxhash(self):
        expected = xxhash.xxh64(signature("apple"), seed=7).intdigest()
        assert base_hash("apple", "xxh64", 7) == expected
        assert base_hash("apple", "xxh64") >= 0

    @pytest.mark.parametrize("hasher", sorted(HASHERS))
    def test_seed_changes_the_hash(self, hasher):
        assert base_hash("apple", hasher, 0) != base_hash("apple", hasher, 1)
