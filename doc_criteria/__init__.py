"""
doc-criteria
Compiles bracketed request parameters into document-store filter, sort and
pagination criteria.
"""

from .criteria import (
    Criteria,
    CriteriaResolver,
    SortDirection,
    assemble_sort,
    compose_criteria,
    get_criteria,
    parse_query,
    resolve_index,
    resolve_size,
    to_criteria
)
from .exceptions import CriteriaError, QueryError, QueryDecodeError, ConfigurationError
from .config import Config, DEFAULT_SIZE

__version__ = "1.0.0"

__all__ = [
    "Criteria",
    "CriteriaResolver",
    "SortDirection",
    "assemble_sort",
    "compose_criteria",
    "get_criteria",
    "parse_query",
    "resolve_index",
    "resolve_size",
    "to_criteria",
    "CriteriaError",
    "QueryError",
    "QueryDecodeError",
    "ConfigurationError",
    "Config",
    "DEFAULT_SIZE"
]
