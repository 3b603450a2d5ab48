"""
Self-checks for the generator: known-answer vectors and statistics.
"""

from checks.statistics import avalanche_fraction, monobit_fraction
from checks.vectors import (
    DEFAULT_AFTER_DISCARD_1000,
    DEFAULT_FIRST_32,
    CheckResult,
    run_all_checks,
)

__all__ = [
    "DEFAULT_AFTER_DISCARD_1000",
    "DEFAULT_FIRST_32",
    "CheckResult",
    "avalanche_fraction",
    "monobit_fraction",
    "run_all_checks",
]
