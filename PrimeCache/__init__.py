from .PrimeCache import PrimeSet, U64_MAX

__all__ = ["PrimeSet", "U64_MAX"]
