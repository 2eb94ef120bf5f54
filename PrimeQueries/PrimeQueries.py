#!/usr/bin/env python3
"""
PrimeQueries - Primality, nth-prime and factorization queries over a PrimeSet.

Every query takes the cache explicitly and extends it only as far as the
question requires.
"""

import bisect
import math
from typing import Any, Dict, Iterator, List, Tuple

from PrimeCache.PrimeCache import PrimeSet, _log_telemetry, _validate_natural

__VERSION__ = "1.0.0"

Factorization = List[Tuple[int, int]]


def _validate_positive(n: Any, name: str = "n") -> int:
    """Validate that n is an integer in [1, U64_MAX]."""
    n = _validate_natural(n, name)
    if n < 1:
        raise ValueError(f"{name} must be ≥ 1, got {n}")
    return n


def _trial_divisors(pset: PrimeSet) -> Iterator[int]:
    """Yield cached primes in order, extending the cache when they run out."""
    i = 0
    while True:
        if i >= len(pset):
            with pset.lock:
                if i >= len(pset):
                    pset.expand()
        yield pset[i]
        i += 1


def is_prime(pset: PrimeSet, n: int) -> bool:
    """
    Test n for primality by trial division against primes ≤ √n.

    The cache is only extended as far as the first divisor found, or to √n
    for a prime. Numbers below 2 are not prime and never trigger extension.
    """
    n = _validate_natural(n)
    if n < 2:
        return False
    bound = math.isqrt(n)
    for p in _trial_divisors(pset):
        if p > bound:
            break
        if n % p == 0:
            return False
    return True


def contains(pset: PrimeSet, n: int) -> bool:
    """Alias of is_prime() for membership-style call sites."""
    return is_prime(pset, n)


def nth(pset: PrimeSet, k: int) -> int:
    """Return the k-th prime, 0-indexed (nth(pset, 0) == 2)."""
    k = _validate_natural(k, "k")
    pset.extend_to_count(k + 1)
    return pset[k]


def factorize(pset: PrimeSet, n: int) -> Factorization:
    """
    Factorize n into ascending (prime, exponent) pairs.

    Args:
        pset: Prime cache to draw trial divisors from
        n: Number to factorize (≥ 1)

    Returns:
        [(p1, e1), (p2, e2), ...] with p1 < p2 < ...; [] for n == 1

    Raises:
        ValueError: for n == 0, which has no factorization
    """
    try:
        n = _validate_positive(n)
    except ValueError as e:
        _log_telemetry(pset.telemetry_log, "factorize_error", {"error": str(e)})
        raise

    result: Factorization = []
    if n == 1:
        return result

    rest = n
    for p in _trial_divisors(pset):
        if p * p > rest:
            break
        exponent = 0
        while rest % p == 0:
            rest //= p
            exponent += 1
        if exponent:
            result.append((p, exponent))
        if rest == 1:
            break

    # At most one prime factor exceeds the square root
    if rest > 1:
        result.append((rest, 1))
    return result


def prime_factors(pset: PrimeSet, n: int) -> List[int]:
    """Prime factors of n with repetition, e.g. 12 -> [2, 2, 3]."""
    return [p for p, e in factorize(pset, n) for _ in range(e)]


def unique_factors(pset: PrimeSet, n: int) -> List[int]:
    """Distinct prime factors of n in ascending order."""
    return [p for p, _ in factorize(pset, n)]


def next_prime(pset: PrimeSet, n: int) -> int:
    """Smallest prime ≥ n."""
    return pset.find(n)[1]


def prime_pi(pset: PrimeSet, n: int) -> int:
    """Number of primes ≤ n."""
    n = _validate_natural(n)
    if n < 2:
        return 0
    pset.extend_to_bound(n)
    return bisect.bisect_right(pset.primes, n)


def metadata() -> Dict[str, Any]:
    """Return module metadata."""
    return {
        "component": "PrimeQueries",
        "version": __VERSION__,
        "queries": ["is_prime", "nth", "factorize", "prime_factors",
                    "unique_factors", "next_prime", "prime_pi"],
    }


def discover() -> Dict[str, str]:
    """Discovery function for component registration."""
    return {"component": "PrimeQueries"}


def _self_test() -> bool:
    """Spot-check each query against hand-computed answers."""
    pset = PrimeSet()
    checks: List[Tuple[str, bool]] = [
        ("is_prime(97)", is_prime(pset, 97)),
        ("not is_prime(91)", not is_prime(pset, 91)),
        ("nth(5)", nth(pset, 5) == 13),
        ("factorize(360)", factorize(pset, 360) == [(2, 3), (3, 2), (5, 1)]),
        ("factorize(1)", factorize(pset, 1) == []),
        ("prime_pi(100)", prime_pi(pset, 100) == 25),
    ]
    return all(ok for _, ok in checks)


if __name__ == "__main__":
    print("Self-test passed" if _self_test() else "Self-test failed")
