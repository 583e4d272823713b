"""
Condition codes accepted in request parameters and the operators they map to.
"""

from typing import Dict, Optional

from .base import Operator

COND_EMPTY = ""
COND_EQ = "eq"
COND_NE = "ne"
COND_GT = "gt"
COND_GTE = "gte"
COND_LT = "lt"
COND_LTE = "lte"
COND_IN = "in"
COND_NIN = "nin"
COND_REGEX = "regex"
COND_LIKE = "like"

CONDITIONS: Dict[str, Operator] = {
    COND_EMPTY: Operator.EQ,
    COND_EQ: Operator.EQ,
    COND_NE: Operator.NE,
    COND_GT: Operator.GT,
    COND_GTE: Operator.GTE,
    COND_LT: Operator.LT,
    COND_LTE: Operator.LTE,
    COND_IN: Operator.IN,
    COND_NIN: Operator.NIN,
    COND_REGEX: Operator.REGEX,
    # No wildcard translation: 'like' patterns are regular expressions
    COND_LIKE: Operator.REGEX,
}


def lookup_condition(code: str) -> Optional[Operator]:
    """Resolve a condition code, returning None when the code is unknown."""
    return CONDITIONS.get(code)
