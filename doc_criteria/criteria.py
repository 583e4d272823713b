#!/usr/bin/env python3
"""
Request criteria: filter document, sort order and pagination in one value.

Query example:
    index=20&size=20&sort[]=sku&sort[]=-amount
    &filters[0][0][field]=sku&filters[0][0][value]=WSH%25&filters[0][0][condition]=like
    &filters[1][0][field]=price&filters[1][0][value]=40&filters[1][0][condition]=eq
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from .config import DEFAULT_FILTER_NAME, DEFAULT_SIZE
from .exceptions import QueryDecodeError
from .filters.coercion import to_int
from .filters.document_backend import DocumentFilterBackend
from .filters.parser import QueryFilterParser, Values, first_value
from .log_manager import get_logger

QUERY_INDEX = "index"
QUERY_SIZE = "size"
QUERY_SORT = "sort"
QUERY_SORT_ARRAY = "sort[]"

DESCENDING_PREFIX = "-"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_ZERO_DECIMAL = re.compile(r"\.0+$")
_LEGACY_OCTAL = re.compile(r"^[+-]?0[0-7]+$")

logger = get_logger('Criteria', component='criteria')


class SortDirection(IntEnum):
    """Sort direction in the integer form document stores accept."""
    ASCENDING = 1
    DESCENDING = -1


SortSpec = Tuple[Tuple[str, SortDirection], ...]


@dataclass(frozen=True)
class Criteria:
    """
    Everything a store needs to run a find for one request.

    Attributes:
        filter: Rendered filter document ({} matches everything)
        sort: (field, direction) pairs in priority order, or None
        index: Number of documents to skip, never negative
        size: Maximum number of documents to return, always positive
    """
    filter: Dict[str, Any]
    sort: Optional[SortSpec]
    index: int
    size: int

    @property
    def skip(self) -> int:
        return self.index

    @property
    def limit(self) -> int:
        return self.size


def parse_query(query: str) -> Dict[str, List[str]]:
    """
    Decode a URL query string into a parameter multimap.

    Args:
        query: Raw query string without the leading '?'

    Returns:
        Dict of key to values, keys in first-seen order

    Raises:
        QueryDecodeError: On malformed percent escapes, ';' separators or
            escapes that do not decode as UTF-8
    """
    bad = _BAD_ESCAPE.search(query)
    if bad:
        raise QueryDecodeError(query, f"invalid percent escape {query[bad.start():bad.start() + 3]!r}")
    if ";" in query:
        raise QueryDecodeError(query, "invalid semicolon separator")

    try:
        pairs = parse_qsl(query, keep_blank_values=True, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise QueryDecodeError(query, f"escape is not valid UTF-8 ({e.reason})") from e

    values: Dict[str, List[str]] = {}
    for key, value in pairs:
        values.setdefault(key, []).append(value)
    return values


def assemble_sort(values: Values) -> Optional[SortSpec]:
    """
    Read the sort order from 'sort[]' or, failing that, 'sort'.

    A leading '-' sorts descending. Empty entries and a bare '-' are skipped.

    Returns:
        Tuple of (field, direction) in input order, or None when neither key is present
    """
    if QUERY_SORT_ARRAY in values:
        entries = values[QUERY_SORT_ARRAY]
    elif QUERY_SORT in values:
        entries = values[QUERY_SORT]
    else:
        return None

    order = []
    for entry in entries:
        if entry.startswith(DESCENDING_PREFIX):
            field = entry[len(DESCENDING_PREFIX):]
            if field:
                order.append((field, SortDirection.DESCENDING))
        elif entry:
            order.append((entry, SortDirection.ASCENDING))
    return tuple(order)


def to_page_number(raw: str) -> Optional[int]:
    """
    Parse a pagination integer, or return None.

    A zero decimal part is dropped ('10.0' -> 10) and a leading zero
    marks an octal literal ('010' -> 8).
    """
    raw = _ZERO_DECIMAL.sub("", raw)
    if _LEGACY_OCTAL.match(raw):
        return int(raw, 8)
    return to_int(raw)


def resolve_index(values: Values) -> int:
    """Offset of the first document; absent, unparsable or negative values give 0."""
    index = to_page_number(first_value(values, QUERY_INDEX)) or 0
    return max(index, 0)


def resolve_size(values: Values, default_size: int = DEFAULT_SIZE) -> int:
    """Page size; absent, unparsable, zero or negative values give default_size."""
    size = to_page_number(first_value(values, QUERY_SIZE))
    if size is None or size <= 0:
        return default_size
    return size


def compose_criteria(filter_document: Dict[str, Any], sort: Optional[SortSpec],
                     index: int, size: int) -> Criteria:
    return Criteria(filter=filter_document, sort=sort, index=index, size=size)


class CriteriaResolver:
    """
    Turns request parameters into Criteria for one filter name.

    Instances hold only configuration and can be shared between threads.
    """

    def __init__(self, filter_name: str = DEFAULT_FILTER_NAME, default_size: int = DEFAULT_SIZE):
        """
        Initialize the resolver.

        Args:
            filter_name: Parameter name holding filter groups
            default_size: Page size when none (or a non-positive one) is requested
        """
        if default_size <= 0:
            raise ValueError(f"default_size must be positive, got {default_size}")
        self.filter_name = filter_name
        self.default_size = default_size
        self.parser = QueryFilterParser()
        self.backend = DocumentFilterBackend()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'CriteriaResolver':
        """Build a resolver from a Config.from_env() / Config.defaults() dict."""
        return cls(**config)

    def from_values(self, values: Values) -> Criteria:
        """Build criteria from an already decoded parameter multimap."""
        filter_ = self.parser.parse_filter(values, self.filter_name)
        criteria = compose_criteria(
            filter_document=self.backend.convert(filter_),
            sort=assemble_sort(values),
            index=resolve_index(values),
            size=resolve_size(values, self.default_size)
        )
        logger.debug(
            f"Resolved criteria for '{self.filter_name}': "
            f"{len(filter_)} expression(s), index={criteria.index}, size={criteria.size}"
        )
        return criteria

    def from_query(self, query: str) -> Criteria:
        """
        Build criteria from a raw query string.

        Raises:
            QueryDecodeError: If the query string is not legally encoded
        """
        return self.from_values(parse_query(query))


def to_criteria(values: Values, filter_name: str = DEFAULT_FILTER_NAME) -> Criteria:
    """Build criteria from a decoded parameter multimap with default settings."""
    return CriteriaResolver(filter_name).from_values(values)


def get_criteria(query: str, filter_name: str = DEFAULT_FILTER_NAME) -> Criteria:
    """
    Build criteria from a raw query string with default settings.

    Raises:
        QueryDecodeError: If the query string is not legally encoded
    """
    return CriteriaResolver(filter_name).from_query(query)
