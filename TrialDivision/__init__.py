from .TrialDivision import factors, factors_uniq, first_factor, is_prime

__all__ = ["factors", "factors_uniq", "first_factor", "is_prime"]
