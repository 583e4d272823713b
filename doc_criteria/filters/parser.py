#!/usr/bin/env python3
"""
Parser for bracketed filter groups in request parameters.

Keys follow name[and][or][attribute]:

         and or
          |  |
    filters[0][0][field]=sku
    filters[0][0][value]=WSH%
    filters[0][0][condition]=like
    filters[0][1][field]=sku
    filters[0][1][value]=WP%
    filters[0][1][condition]=like
    filters[1][0][field]=price
    filters[1][0][value]=40

Entries sharing an AND index are OR-ed together; AND groups are combined
by conjunction. The example above parses to
(sku ~ WSH% OR sku ~ WP%) AND price == 40.
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..log_manager import get_logger, log_with_context
from .base import Expr, Filter, Leaf, Logical, Operator, RegexMatch
from .coercion import coerce_value
from .conditions import lookup_condition

ATTR_FIELD = "field"
ATTR_VALUE = "value"
ATTR_CONDITION = "condition"

REGEX_OPTIONS = "i"

Values = Mapping[str, Sequence[str]]
GroupKey = Tuple[str, str, str]

_KEY_PATTERN = re.compile(
    r"^([^\[\]]+)\[([^\[\]]+)\]\[([^\[\]]+)\]\[(field|value|condition)\]$"
)


def index_sort_key(index: str) -> Tuple[int, int, str]:
    """Order numeric indices numerically, ahead of any non-numeric ones."""
    if index.isdigit():
        return (0, int(index), "")
    return (1, 0, index)


def first_value(values: Values, key: str) -> str:
    """Return the first value for key, or '' when absent."""
    items = values.get(key)
    if not items:
        return ""
    return items[0]


class QueryFilterParser:
    """
    Builds one Filter per filter name from a flat parameter multimap.

    Incomplete input never raises: a group without a field or with an
    unknown condition code is dropped and the rest of the filter is kept.
    """

    def __init__(self, regex_options: str = REGEX_OPTIONS):
        """
        Initialize the parser.

        Args:
            regex_options: Options attached to regex/like conditions
        """
        self.regex_options = regex_options
        self.logger = get_logger('QueryFilterParser', component='filters')

    def parse(self, values: Values) -> Dict[str, Filter]:
        """
        Parse every filter group in the parameters.

        Args:
            values: Parameter multimap (key -> list of values)

        Returns:
            Dict of filter name to Filter, in first-seen name order.
            Names whose groups were all dropped are omitted.
        """
        groups: Dict[str, Dict[str, Dict[str, Expr]]] = {}

        for key in self._group_keys(values):
            expr = self._build_leaf(values, key)
            if expr is None:
                continue
            name, and_index, or_index = key
            groups.setdefault(name, {}).setdefault(and_index, {})[or_index] = expr

        return {name: self._assemble(or_groups) for name, or_groups in groups.items()}

    def parse_filter(self, values: Values, name: str) -> Filter:
        """Parse the groups of a single filter name; missing names give an empty Filter."""
        return self.parse(values).get(name, Filter())

    def _group_keys(self, values: Values) -> List[GroupKey]:
        """Distinct (name, and, or) triples in name order, then index order."""
        seen: Dict[GroupKey, None] = {}
        names: Dict[str, int] = {}
        for key in values:
            match = _KEY_PATTERN.match(key)
            if match is None:
                continue
            triple = (match.group(1), match.group(2), match.group(3))
            names.setdefault(triple[0], len(names))
            seen.setdefault(triple, None)

        return sorted(
            seen,
            key=lambda t: (names[t[0]], index_sort_key(t[1]), index_sort_key(t[2]))
        )

    def _build_leaf(self, values: Values, key: GroupKey) -> Optional[Leaf]:
        """Build the leaf for one triple, or None when the triple is incomplete."""
        prefix = "%s[%s][%s]" % key

        field = first_value(values, f"{prefix}[{ATTR_FIELD}]")
        if not field:
            self._log_dropped(prefix, "missing field")
            return None

        code = first_value(values, f"{prefix}[{ATTR_CONDITION}]")
        operator = lookup_condition(code)
        if operator is None:
            self._log_dropped(prefix, "unknown condition", condition=code)
            return None

        value = coerce_value(first_value(values, f"{prefix}[{ATTR_VALUE}]"), operator)

        if operator == Operator.REGEX:
            return Leaf(operator, field, RegexMatch(value, self.regex_options))
        return Leaf(operator, field, value)

    def _assemble(self, or_groups: Dict[str, Dict[str, Expr]]) -> Filter:
        """Collapse OR groups and join them under a single AND."""
        conjuncts: List[Expr] = []
        for members in or_groups.values():
            exprs = list(members.values())
            if len(exprs) == 1:
                conjuncts.append(exprs[0])
            else:
                conjuncts.append(Logical(Operator.OR, exprs))

        if not conjuncts:
            return Filter()
        if len(conjuncts) == 1:
            return Filter((conjuncts[0],))
        return Filter((Logical(Operator.AND, conjuncts),))

    def _log_dropped(self, prefix: str, reason: str, **context):
        log_with_context(
            self.logger, logging.DEBUG,
            f"Dropping filter group {prefix}: {reason}",
            context or None
        )
