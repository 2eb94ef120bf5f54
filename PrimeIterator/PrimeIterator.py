#!/usr/bin/env python3
"""
PrimeIterator - Lazy, restartable sequences of primes and factorizations.

Cursors hold only a weak reference to their PrimeSet, so the cache's owner
controls its lifetime. Each cursor keeps its own position; any number of
cursors may walk the same cache.
"""

import itertools
import weakref
from typing import Any, Dict, Iterator, Tuple

import pandas as pd

from PrimeCache.PrimeCache import PrimeSet, _validate_natural
from PrimeQueries.PrimeQueries import Factorization, _validate_positive, factorize

__VERSION__ = "1.0.0"


class PrimeCursor:
    """
    Pull-based iterator over a PrimeSet.

    When ``expand`` is true the cursor is infinite: reaching the end of the
    cached primes extends the cache by one. Otherwise it stops at the
    watermark seen when it gets there, and stays stopped.
    """

    def __init__(self, pset: PrimeSet, start: int = 0, *, expand: bool = True):
        self._ref = weakref.ref(pset)
        self._index = _validate_natural(start, "start")
        self.expand = expand
        self._exhausted = False

    @property
    def index(self) -> int:
        """Position of the next prime to yield."""
        return self._index

    def _cache(self) -> PrimeSet:
        pset = self._ref()
        if pset is None:
            raise ReferenceError("PrimeSet behind this cursor no longer exists")
        return pset

    def __iter__(self) -> "PrimeCursor":
        return self

    def __next__(self) -> int:
        if self._exhausted:
            raise StopIteration
        pset = self._cache()
        if self._index >= len(pset):
            if not self.expand:
                self._exhausted = True
                raise StopIteration
            with pset.lock:
                while self._index >= len(pset):
                    pset.expand()
        value = pset[self._index]
        self._index += 1
        return value

    def __repr__(self) -> str:
        return f"PrimeCursor(index={self._index}, expand={self.expand})"


def iterate(pset: PrimeSet) -> PrimeCursor:
    """Infinite sequence of all primes from 2, independent of other cursors."""
    return PrimeCursor(pset)


def generator(pset: PrimeSet) -> PrimeCursor:
    """Infinite sequence of primes not yet in the cache."""
    return PrimeCursor(pset, len(pset))


def known(pset: PrimeSet) -> PrimeCursor:
    """Finite sequence of the primes already cached."""
    return PrimeCursor(pset, expand=False)


def factorization_iter(pset: PrimeSet, start: int = 1) -> Iterator[Tuple[int, Factorization]]:
    """
    Yield (n, factorize(n)) for n = start, start + 1, ...

    Args:
        pset: Prime cache shared by every factorization
        start: First number to factorize (≥ 1)
    """
    start = _validate_positive(start, "start")
    ref = weakref.ref(pset)
    del pset

    def _walk() -> Iterator[Tuple[int, Factorization]]:
        for n in itertools.count(start):
            cache = ref()
            if cache is None:
                raise ReferenceError("PrimeSet behind this iterator no longer exists")
            factors = factorize(cache, n)
            # Drop the strong reference while suspended
            del cache
            yield n, factors

    return _walk()


def factorization_frame(pset: PrimeSet, start: int = 1, count: int = 100) -> pd.DataFrame:
    """
    Tabulate factorizations of start .. start + count - 1.

    Returns:
        DataFrame with columns n, factors, omega, big_omega, is_prime
    """
    if count < 0:
        raise ValueError(f"count must be ≥ 0, got {count}")
    rows = []
    for n, factors in itertools.islice(factorization_iter(pset, start), count):
        rows.append({
            "n": n,
            "factors": factors,
            "omega": len(factors),
            "big_omega": sum(e for _, e in factors),
            "is_prime": factors == [(n, 1)],
        })
    return pd.DataFrame(rows, columns=["n", "factors", "omega", "big_omega", "is_prime"])


def metadata() -> Dict[str, Any]:
    """Return module metadata."""
    return {
        "component": "PrimeIterator",
        "version": __VERSION__,
        "sequences": ["iterate", "generator", "known", "factorization_iter"],
        "dependencies": {"pandas": pd.__version__},
    }


def discover() -> Dict[str, str]:
    """Discovery function for component registration."""
    return {"component": "PrimeIterator"}


def _self_test() -> bool:
    """Check two cursors agree and factorizations start as expected."""
    pset = PrimeSet()
    first = list(itertools.islice(iterate(pset), 10))
    second = list(itertools.islice(iterate(pset), 10))
    if first != second or first != [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]:
        return False
    head = list(itertools.islice(factorization_iter(pset, 1), 4))
    return head == [(1, []), (2, [(2, 1)]), (3, [(3, 1)]), (4, [(2, 2)])]


if __name__ == "__main__":
    print("Self-test passed" if _self_test() else "Self-test failed")
