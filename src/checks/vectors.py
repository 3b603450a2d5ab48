"""
Known-answer vectors and property checks run by `blabla verify`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from checks.statistics import avalanche_fraction
from prng import BlaBla

# First 32 words of the default stream (10 rounds).
DEFAULT_FIRST_32: Final[tuple[int, ...]] = (
    9036098508571513124,
    1341246940318440153,
    2142299211657633629,
    8183554236942590742,
    17486373174159459597,
    7102532133122205976,
    18094074012711797215,
    6614302872401931421,
    17939224087515728387,
    1829491614337620509,
    5082371479884098038,
    12245049734530056241,
    1755901756493526910,
    6608364768521165873,
    1351035895842981943,
    7034269879864141561,
    13519986017490054402,
    5229023789915273897,
    3285207876884037361,
    4207082852925370121,
    9991572779020123576,
    5248688147772179024,
    1595744562095413455,
    14226795111670523804,
    2593105858346750728,
    3690429978402064410,
    15379152063449754634,
    859464340648934359,
    11479465968382213623,
    9665801790195092325,
    7111327344881995307,
    12275657773062998169,
)
# Word drawn after the first 32 words and discard(1000), i.e. word 1032.
DEFAULT_AFTER_DISCARD_1000: Final[int] = 6638870557153950450


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one self-check."""

    name: str
    passed: bool
    detail: str


def check_known_answers() -> CheckResult:
    """Compare the default stream against the pinned vector."""
    gen = BlaBla()
    words = tuple(gen.next() for _ in range(len(DEFAULT_FIRST_32)))
    gen.discard(1000)
    after = gen.next()
    if words != DEFAULT_FIRST_32:
        first_bad = next(
            i
            for i, (a, b) in enumerate(zip(words, DEFAULT_FIRST_32))
            if a != b
        )
        return CheckResult(
            "known_answers", False, f"mismatch at word {first_bad}"
        )
    if after != DEFAULT_AFTER_DISCARD_1000:
        return CheckResult(
            "known_answers", False, "mismatch after discard(1000)"
        )
    return CheckResult("known_answers", True, "33 words match")


def check_discard_equivalence(
    skips: tuple[int, ...] = (0, 1, 15, 16, 17, 250),
) -> CheckResult:
    """discard(n) then next() must equal the (n+1)-th next()."""
    for n in skips:
        skipped = BlaBla()
        skipped.next()
        skipped.discard(n)
        stepped = BlaBla()
        stepped.next()
        for _ in range(n):
            stepped.next()
        if skipped.next() != stepped.next():
            return CheckResult("discard_equivalence", False, f"n={n}")
    return CheckResult("discard_equivalence", True, f"{len(skips)} skips")


def check_round_trip() -> CheckResult:
    """serialize/deserialize preserves equality and continuation."""
    gen = BlaBla(0xFFFFFFFFFFFFFFFF, 7)
    gen.discard(37)
    restored = BlaBla().deserialize(gen.serialize())
    same = restored == gen and [restored.next() for _ in range(20)] == [
        gen.next() for _ in range(20)
    ]
    return CheckResult("round_trip", same, gen.serialize())


def check_cache_independence() -> CheckResult:
    """Equal key and counter compare equal whatever the cache holds."""
    warm = BlaBla()
    for _ in range(5):
        warm.next()
    cold = BlaBla()
    cold.discard(5)
    ok = warm == cold and warm.next() == cold.next()
    return CheckResult("cache_independence", ok, "warm vs cold cache")


def check_avalanche(trials: int, min_flip_fraction: float) -> CheckResult:
    """Flipping one seed bit changes a healthy share of output bits."""
    fractions = [
        avalanche_fraction(0x0123456789ABCDEF, bit % 64)
        for bit in range(trials)
    ]
    worst = min(fractions) if fractions else 0.0
    return CheckResult(
        "avalanche", worst >= min_flip_fraction, f"worst={worst:.4f}"
    )


def run_all_checks(
    avalanche_trials: int = 64, min_flip_fraction: float = 0.4
) -> list[CheckResult]:
    """Run every self-check in a fixed order."""
    return [
        check_known_answers(),
        check_discard_equivalence(),
        check_round_trip(),
        check_cache_independence(),
        check_avalanche(avalanche_trials, min_flip_fraction),
    ]
