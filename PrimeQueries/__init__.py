from .PrimeQueries import (
    contains,
    factorize,
    is_prime,
    next_prime,
    nth,
    prime_factors,
    prime_pi,
    unique_factors,
)

__all__ = [
    "contains",
    "factorize",
    "is_prime",
    "next_prime",
    "nth",
    "prime_factors",
    "prime_pi",
    "unique_factors",
]
