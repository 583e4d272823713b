#!/usr/bin/env python3
"""
Best-effort value typing for raw parameter strings.

Request parameters arrive as text. Without a schema, the coercion engine
guesses the intended type so range and equality conditions compare
correctly against numeric and temporal fields:

    >>> coerce_value("49.99", Operator.GT)
    49.99
    >>> coerce_value("1,2,3", Operator.IN)
    [1.0, 2.0, 3.0]
    >>> coerce_value("WSH%", Operator.REGEX)
    'WSH%'
"""

import re
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from dateutil import parser as date_parser
from dateutil.parser import ParserError

from .base import Operator

NULL_LITERALS = {"null", "nil"}

TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}

LIST_SEPARATOR = ","

_DIGIT = re.compile(r"[0-9]")

# Two defaults that disagree on every date part; a complete timestamp
# parses to the same value under both
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _is_plain_number(raw: str) -> bool:
    return raw == raw.strip() and raw.isascii()


def to_float(raw: str) -> Optional[float]:
    """Parse an ASCII float without digit separators, or return None."""
    if not _is_plain_number(raw) or "_" in raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def to_int(raw: str) -> Optional[int]:
    """Parse an ASCII integer with base prefix detection (0x, 0o, 0b), or return None."""
    if not _is_plain_number(raw):
        return None
    try:
        return int(raw, 0)
    except ValueError:
        return None


def to_bool(raw: str) -> Optional[bool]:
    """Parse a boolean literal, or return None."""
    if raw in TRUE_LITERALS:
        return True
    if raw in FALSE_LITERALS:
        return False
    return None


def to_timestamp(raw: str) -> Optional[datetime]:
    """
    Parse a complete date or timestamp string, or return None.

    Partial dates such as '10-20', '3/4' or 'May 5' are rejected, since
    the missing parts would otherwise be filled from the current date.
    Strings without any digit are never timestamps.
    """
    if not _DIGIT.search(raw):
        return None
    try:
        first = date_parser.parse(raw, default=_DEFAULT_A)
        second = date_parser.parse(raw, default=_DEFAULT_B)
    except (ParserError, ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first


def _coerce_all(items: Sequence[str], convert: Callable[[str], Any]) -> Optional[List[Any]]:
    """Convert every item or nothing."""
    result = []
    for item in items:
        converted = convert(item)
        if converted is None:
            return None
        result.append(converted)
    return result


def coerce_value(raw: str, operator: Operator) -> Any:
    """
    Infer a typed value for a raw parameter string.

    Args:
        raw: The raw parameter value
        operator: The resolved operator the value will be compared with

    Returns:
        The raw string for regex operators and empty values, None for
        'null'/'nil', a uniformly typed list for $in/$nin, otherwise the
        first of float, int, bool or datetime that parses, else the string.
    """
    if operator == Operator.REGEX or raw == "":
        return raw

    if raw.lower() in NULL_LITERALS:
        return None

    if operator in (Operator.IN, Operator.NIN):
        items = raw.split(LIST_SEPARATOR)
        for convert in (to_float, to_int, to_timestamp):
            converted = _coerce_all(items, convert)
            if converted is not None:
                return converted
        return items

    for convert in (to_float, to_int, to_bool, to_timestamp):
        converted = convert(raw)
        if converted is not None:
            return converted
    return raw
