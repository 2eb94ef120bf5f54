#!/usr/bin/env python3
"""
TrialDivision - Prime helpers that do not use a PrimeSet.

Faster than building a cache for a one-off question, slower over many
queries since nothing is remembered between calls.
"""

import math
from typing import Any, Dict, List

from PrimeCache.PrimeCache import _validate_natural

__VERSION__ = "1.0.0"


def first_factor(n: int) -> int:
    """Smallest factor of n greater than 1 (n itself when n is prime)."""
    n = _validate_natural(n)
    if n < 2:
        raise ValueError(f"n must be ≥ 2, got {n}")
    if n % 2 == 0:
        return 2
    for d in range(3, math.isqrt(n) + 1, 2):
        if n % d == 0:
            return d
    return n


def factors(n: int) -> List[int]:
    """Prime factors of n with repetition; [] for n ≤ 1."""
    n = _validate_natural(n)
    result: List[int] = []
    while n > 1:
        d = first_factor(n)
        result.append(d)
        n //= d
    return result


def factors_uniq(n: int) -> List[int]:
    """Distinct prime factors of n; [] for n ≤ 1."""
    n = _validate_natural(n)
    result: List[int] = []
    while n > 1:
        d = first_factor(n)
        result.append(d)
        while n % d == 0:
            n //= d
    return result


def is_prime(n: int) -> bool:
    """Check every odd number up to √n."""
    n = _validate_natural(n)
    return n >= 2 and first_factor(n) == n


def metadata() -> Dict[str, Any]:
    """Return module metadata."""
    return {
        "component": "TrialDivision",
        "version": __VERSION__,
        "uses_cache": False,
    }


def discover() -> Dict[str, str]:
    """Discovery function for component registration."""
    return {"component": "TrialDivision"}


def _self_test() -> bool:
    """Spot-check the helpers."""
    return (
        factors(144) == [2, 2, 2, 2, 3, 3]
        and factors_uniq(144) == [2, 3]
        and is_prime(13)
        and not is_prime(169)
    )


if __name__ == "__main__":
    print("Self-test passed" if _self_test() else "Self-test failed")
