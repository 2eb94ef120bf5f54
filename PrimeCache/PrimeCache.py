#!/usr/bin/env python3
"""
PrimeCache - Growable, gapless cache of primes extended by trial division.

A PrimeSet holds every prime up to its watermark (the largest prime found so
far). New primes are found by trial division against the primes already in
the cache, which is sufficient because the cache is complete up to the square
root of any candidate it tests.
"""

import bisect
import json
import math
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

__VERSION__ = "1.0.0"

# Constants
SEED_PRIMES = (2, 3)
U64_MAX = int(np.iinfo(np.uint64).max)
TELEMETRY_LOG: Optional[Path] = None
GROUND_TRUTH_PRIMES = [
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71
]


def _log_telemetry(log_path: Optional[Path], event: str, data: Dict[str, Any]) -> None:
    """Append a telemetry record to a JSONL file, if one is configured."""
    if log_path is None:
        return
    record = {"event": event, "timestamp": time.time(), **data}
    with Path(log_path).open("a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\n")


def _validate_natural(n: Any, name: str = "n") -> int:
    """Validate that n is an integer in [0, U64_MAX] and return it as int."""
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(n).__name__}")
    n = int(n)
    if n < 0:
        raise ValueError(f"{name} must be ≥ 0, got {n}")
    if n > U64_MAX:
        raise OverflowError(f"{name} exceeds the unsigned 64-bit range, got {n}")
    return n


class PrimeSet:
    """
    Ascending cache of all primes up to a watermark, grown on demand.

    The only way to add primes is through the extension methods, so the
    cache is always gapless and sorted. Reads of the existing prefix need no
    locking; every extension holds ``lock``.

    Example:
        pset = PrimeSet()
        pset.extend_to_bound(100)
        pset.watermark  # 101
        pset[25]        # 101
    """

    def __init__(self, *, telemetry_log: Optional[Path] = None):
        """
        Args:
            telemetry_log: JSONL file receiving extension events
                (defaults to TELEMETRY_LOG; None there disables telemetry)
        """
        self._primes: List[int] = list(SEED_PRIMES)
        self.telemetry_log = telemetry_log if telemetry_log is not None else TELEMETRY_LOG
        self.lock = threading.RLock()

    def expand(self) -> int:
        """
        Find the next prime after the watermark and append it.

        Returns:
            The newly cached prime

        Raises:
            OverflowError: if the next prime would exceed U64_MAX
        """
        with self.lock:
            primes = self._primes
            candidate = primes[-1] + 2
            while True:
                if candidate > U64_MAX:
                    _log_telemetry(self.telemetry_log, "overflow", {
                        "watermark": primes[-1],
                        "count": len(primes),
                    })
                    raise OverflowError(
                        f"No prime after {primes[-1]} fits in an unsigned 64-bit integer"
                    )
                bound = math.isqrt(candidate)
                for p in primes:
                    if p > bound:
                        primes.append(candidate)
                        return candidate
                    if candidate % p == 0:
                        break
                candidate += 2

    def _extend_while(self, needs_more: Callable[[], bool], target: Dict[str, int]) -> int:
        """Expand while needs_more() holds; return how many primes were added."""
        with self.lock:
            before = len(self._primes)
            if not needs_more():
                return 0
            start_time = time.perf_counter()
            while needs_more():
                self.expand()
            added = len(self._primes) - before
            _log_telemetry(self.telemetry_log, "cache_extended", {
                **target,
                "added": added,
                "count": len(self._primes),
                "watermark": self._primes[-1],
                "time_ms": int((time.perf_counter() - start_time) * 1000),
            })
            return added

    def extend_to_bound(self, n: int) -> int:
        """
        Extend the cache until its watermark is at least n.

        Calling again with an already covered bound is a no-op.

        Returns:
            Number of primes appended
        """
        n = _validate_natural(n)
        return self._extend_while(lambda: self._primes[-1] < n, {"bound": n})

    def extend_to_count(self, k: int) -> int:
        """Extend the cache until it holds at least k primes."""
        k = _validate_natural(k, "k")
        return self._extend_while(lambda: len(self._primes) < k, {"target_count": k})

    def extend_to_sqrt(self, n: int) -> int:
        """Extend until watermark² > n, so every prime ≤ √n is cached."""
        n = _validate_natural(n)
        return self._extend_while(
            lambda: self._primes[-1] * self._primes[-1] <= n, {"sqrt_of": n}
        )

    def find(self, n: int) -> Tuple[int, int]:
        """
        Find the smallest prime ≥ n, extending the cache as needed.

        Returns:
            (index, prime); if n is prime the result is (index, n)
        """
        n = _validate_natural(n)
        self.extend_to_bound(n)
        ix = bisect.bisect_left(self._primes, n)
        return ix, self._primes[ix]

    def find_known(self, n: int) -> Optional[Tuple[int, int]]:
        """Like find(), but only consults cached primes; None past the watermark."""
        n = _validate_natural(n)
        primes = self._primes
        if n > primes[-1]:
            return None
        ix = bisect.bisect_left(primes, n)
        return ix, primes[ix]

    @property
    def watermark(self) -> int:
        """Largest cached prime."""
        return self._primes[-1]

    @property
    def primes(self) -> Tuple[int, ...]:
        """Read-only snapshot of the cached primes."""
        return tuple(self._primes)

    def iter_known(self) -> Iterator[int]:
        """Iterate over the primes cached at call time, without extending."""
        return iter(self._primes[:])

    def to_array(self) -> np.ndarray:
        """Cached primes as a uint64 numpy array."""
        return np.array(self._primes, dtype=np.uint64)

    def __len__(self) -> int:
        return len(self._primes)

    def __getitem__(self, index: Union[int, slice]) -> Union[int, List[int]]:
        return self._primes[index]

    def __repr__(self) -> str:
        return f"PrimeSet(count={len(self._primes)}, watermark={self._primes[-1]})"


def metadata() -> Dict[str, Any]:
    """Return module metadata and capabilities."""
    return {
        "component": "PrimeCache",
        "version": __VERSION__,
        "seed_primes": list(SEED_PRIMES),
        "max_value": U64_MAX,
        "thread_safe_extension": True,
    }


def discover() -> Dict[str, str]:
    """Discovery function for component registration."""
    return {"component": "PrimeCache"}


def _self_test() -> bool:
    """Check a fresh cache against the known first primes."""
    pset = PrimeSet()
    pset.extend_to_count(len(GROUND_TRUTH_PRIMES))
    if list(pset[:len(GROUND_TRUTH_PRIMES)]) != GROUND_TRUTH_PRIMES:
        return False
    return pset.find(1000) == (168, 1009)


if __name__ == "__main__":
    print("Self-test passed" if _self_test() else "Self-test failed")
