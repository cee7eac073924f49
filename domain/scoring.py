"""
Domain: Lead scoring.

Rules implemented here:
- The score seed is read from a numeric-looking field. Text has every non-digit
  character stripped before parsing; anything unparseable seeds 50.
- A textual intent hint clamps the seed, it never replaces it:
  - "low"          → min(seed, 35)
  - "warm"         → max(seed, 40)
  - "high" / "hot" → max(seed, 70)
  - anything else  → seed
- Quality is 70 when the budget-match flag is the literal "Yes", otherwise the
  unclamped seed. There is no hint-based clamp for quality.
- Every score is bounded to 0..100.
"""

from __future__ import annotations

import math
import re
from typing import Any

from .lead import SCORE_MAX, SCORE_MIN

DEFAULT_SCORE_SEED = 50
BUDGET_MATCH_QUALITY = 70

LOW_INTENT_CEILING = 35
WARM_INTENT_FLOOR = 40
HIGH_INTENT_FLOOR = 70

_NON_DIGITS = re.compile(r"\D")


def bound_score(value: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def parse_score_seed(value: Any) -> int:
    """
    Parse a raw score value into a bounded integer seed.

    Examples:
        parse_score_seed("85")      # 85
        parse_score_seed("Score: 7") # 7
        parse_score_seed(72.6)      # 73
        parse_score_seed("n/a")     # 50
        parse_score_seed(None)      # 50
    """

    if isinstance(value, bool) or value is None:
        return DEFAULT_SCORE_SEED
    if isinstance(value, int):
        return bound_score(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return DEFAULT_SCORE_SEED
        return bound_score(int(math.floor(value + 0.5)))

    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return DEFAULT_SCORE_SEED
    return bound_score(int(digits))


def clamp_intent(seed: int, hint: Any) -> int:
    """Apply the textual intent hint to a numeric seed (clamp, not reset)."""

    text = str(hint).strip().lower() if hint is not None else ""

    if text == "low":
        result = min(seed, LOW_INTENT_CEILING)
    elif text == "warm":
        result = max(seed, WARM_INTENT_FLOOR)
    elif text in ("high", "hot"):
        result = max(seed, HIGH_INTENT_FLOOR)
    else:
        result = seed
    return bound_score(result)


def compute_quality_score(seed: int, budget_match: Any) -> int:
    """Quality is forced to 70 on a literal "Yes" budget match, else the seed."""

    if budget_match is not None and str(budget_match).strip() == "Yes":
        return BUDGET_MATCH_QUALITY
    return bound_score(seed)


__all__ = [
    "BUDGET_MATCH_QUALITY",
    "DEFAULT_SCORE_SEED",
    "bound_score",
    "clamp_intent",
    "compute_quality_score",
    "parse_score_seed",
]
