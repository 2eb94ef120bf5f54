"""
Tests for the PrimeQueries functions.

Run with: pytest tests/test_prime_queries.py -v
"""

import json
import math

import pytest

from PrimeCache.PrimeCache import PrimeSet
from PrimeQueries import PrimeQueries
from PrimeQueries.PrimeQueries import (
    contains,
    factorize,
    is_prime,
    next_prime,
    nth,
    prime_factors,
    prime_pi,
    unique_factors,
)


def brute_is_prime(n):
    return n >= 2 and all(n % d for d in range(2, math.isqrt(n) + 1))


@pytest.fixture
def pset():
    return PrimeSet()


class TestIsPrime:
    """Tests for is_prime / contains."""

    def test_examples(self, pset):
        """97 is prime, 91 = 7 × 13 is not."""
        assert is_prime(pset, 97) is True
        assert is_prime(pset, 91) is False
        assert contains(pset, 97) is True

    def test_below_two_needs_no_extension(self, pset):
        """0 and 1 are not prime and leave the cache alone."""
        assert is_prime(pset, 0) is False
        assert is_prime(pset, 1) is False
        assert len(pset) == 2

    def test_matches_brute_force(self, pset):
        """Agrees with plain trial division for every n < 3000."""
        for n in range(3000):
            assert is_prime(pset, n) == brute_is_prime(n), n

    def test_repeated_queries_agree(self, pset):
        """Answers do not depend on how far the cache has grown."""
        first = [is_prime(pset, n) for n in (13, 45, 169, 7, 9, 5)]
        pset.extend_to_bound(10_000)
        second = [is_prime(pset, n) for n in (13, 45, 169, 7, 9, 5)]

        assert first == second == [True, False, False, True, False, True]

    def test_large_values(self, pset):
        """Handles primes and semiprimes around 2**31."""
        assert is_prime(pset, 954377)
        assert is_prime(pset, 954379)
        assert not is_prime(pset, 954377 * 954379)
        assert is_prime(pset, 2147483647)
        assert not is_prime(pset, 2147483643)
        assert not is_prime(pset, 2147483649)
        assert is_prime(pset, 63061489)
        assert not is_prime(pset, 63061491)

    def test_composite_stops_at_first_divisor(self, pset):
        """An even number does not grow the cache."""
        assert not is_prime(pset, 2 ** 60)
        assert len(pset) == 2

    def test_always_returns_bool(self, pset):
        """Primes, composites and edge values all give a real bool."""
        for n in (0, 1, 2, 3, 4, 25, 97, 2 ** 31 - 1):
            assert isinstance(is_prime(pset, n), bool)

    def test_negative_rejected(self, pset):
        with pytest.raises(ValueError):
            is_prime(pset, -7)


class TestNth:
    """Tests for nth."""

    def test_examples(self, pset):
        """nth is 0-indexed."""
        assert nth(pset, 0) == 2
        assert nth(pset, 5) == 13

    def test_strictly_increasing(self, pset):
        """nth(k) < nth(k + 1)."""
        values = [nth(pset, k) for k in range(300)]

        assert all(a < b for a, b in zip(values, values[1:]))

    def test_deterministic(self, pset):
        """Interleaved queries never change nth(k)."""
        before = nth(pset, 50)
        is_prime(pset, 1_000_003)
        factorize(pset, 360)

        assert nth(pset, 50) == before == 233

    def test_grows_only_as_needed(self, pset):
        """nth(k) caches exactly k + 1 primes when starting small."""
        nth(pset, 9)

        assert len(pset) == 10


class TestFactorize:
    """Tests for factorize and derived helpers."""

    def test_example(self, pset):
        """360 = 2³ × 3² × 5."""
        assert factorize(pset, 360) == [(2, 3), (3, 2), (5, 1)]

    def test_one_is_empty(self, pset):
        assert factorize(pset, 1) == []

    def test_zero_rejected(self, pset):
        """0 has no factorization."""
        with pytest.raises(ValueError):
            factorize(pset, 0)

    def test_prime_is_own_factor(self, pset):
        assert factorize(pset, 97) == [(97, 1)]

    def test_large_leftover_factor(self, pset):
        """A single factor above √n is appended with exponent 1."""
        assert factorize(pset, 2 * 1_000_003) == [(2, 1), (1_000_003, 1)]

    def test_round_trip(self, pset):
        """Product of p**e reconstructs n, primes ascending."""
        for n in range(1, 2000):
            result = factorize(pset, n)
            assert math.prod(p ** e for p, e in result) == n
            assert [p for p, _ in result] == sorted({p for p, _ in result})
            assert all(brute_is_prime(p) for p, _ in result)

    def test_prime_factors(self, pset):
        """prime_factors repeats each prime by its exponent."""
        cases = {
            1: [],
            2: [2],
            4: [2, 2],
            12: [2, 2, 3],
            121: [11, 11],
            144: [2, 2, 2, 2, 3, 3],
            10_000_000: [2] * 7 + [5] * 7,
        }
        for n, expected in cases.items():
            assert prime_factors(pset, n) == expected

    def test_unique_factors(self, pset):
        assert unique_factors(pset, 144) == [2, 3]
        assert unique_factors(pset, 1) == []

    def test_zero_logged(self, tmp_path):
        """Invalid input is recorded in telemetry before raising."""
        log = tmp_path / "telemetry.jsonl"
        pset = PrimeSet(telemetry_log=log)

        with pytest.raises(ValueError):
            factorize(pset, 0)
        record = json.loads(log.read_text().splitlines()[-1])
        assert record["event"] == "factorize_error"


class TestCounting:
    """Tests for next_prime and prime_pi."""

    def test_next_prime(self, pset):
        assert next_prime(pset, 1000) == 1009
        assert next_prime(pset, 13) == 13

    def test_prime_pi(self, pset):
        assert prime_pi(pset, 1) == 0
        assert prime_pi(pset, 2) == 1
        assert prime_pi(pset, 100) == 25
        assert prime_pi(pset, 1000) == 168


class TestModule:
    """Tests for registration helpers."""

    def test_discover(self):
        assert PrimeQueries.discover() == {"component": "PrimeQueries"}

    def test_metadata_lists_queries(self):
        assert "factorize" in PrimeQueries.metadata()["queries"]

    def test_self_test(self):
        assert PrimeQueries._self_test() is True
