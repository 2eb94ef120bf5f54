from .PrimeIterator import (
    PrimeCursor,
    factorization_frame,
    factorization_iter,
    generator,
    iterate,
    known,
)

__all__ = [
    "PrimeCursor",
    "factorization_frame",
    "factorization_iter",
    "generator",
    "iterate",
    "known",
]
