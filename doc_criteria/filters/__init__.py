"""
Filter expressions for document-store queries.

This module compiles bracketed request parameters into expression trees and
renders them as MongoDB-style filter documents. The same trees can be built
directly with the fluent constructors.

Example usage:
    from urllib.parse import parse_qs
    from doc_criteria.filters import QueryFilterParser, DocumentFilterBackend

    values = parse_qs(
        "filters[0][0][field]=sku&filters[0][0][value]=WSH&filters[0][0][condition]=like"
        "&filters[0][1][field]=price&filters[0][1][value]=40&filters[0][1][condition]=lte"
    )
    expression = QueryFilterParser().parse_filter(values, "filters")

    backend = DocumentFilterBackend()
    backend.convert(expression)
    # {'$or': [{'sku': {'$regex': 'WSH', '$options': 'i'}},
    #          {'price': {'$lte': 40.0}}]}

    # Built directly
    from doc_criteria.filters import builder as f
    f.filter_of(f.or_(f.regex("sku", "WSH", "i"), f.lte("price", 40.0)))
"""

from .base import (
    Operator,
    RegexMatch,
    Leaf,
    Logical,
    Expr,
    Filter,
    FilterBackend,
    FilterError,
    UnsupportedOperatorError,
    InvalidFilterError
)

from .conditions import CONDITIONS, lookup_condition
from .coercion import coerce_value
from .parser import QueryFilterParser
from .document_backend import DocumentFilterBackend, render
from . import builder

__all__ = [
    # Core classes
    'Operator',
    'RegexMatch',
    'Leaf',
    'Logical',
    'Expr',
    'Filter',
    'FilterBackend',

    # Parsing
    'CONDITIONS',
    'lookup_condition',
    'coerce_value',
    'QueryFilterParser',

    # Rendering
    'DocumentFilterBackend',
    'render',
    'builder',

    # Errors
    'FilterError',
    'UnsupportedOperatorError',
    'InvalidFilterError'
]
