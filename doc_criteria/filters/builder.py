"""
Fluent constructors for filter expressions.

Builds the same expression trees the query parser produces, for code that
composes filters directly:

    filter_of(
        or_(eq("status", "active"), gte("priority", 5)),
        elem_match("items", eq("sku", "WSH"), gt("qty", 1)),
    )
"""

from typing import Any, Dict

from .base import Expr, Filter, InvalidFilterError, Leaf, Logical, Operator, RegexMatch
from .document_backend import DocumentFilterBackend

_backend = DocumentFilterBackend()


def filter_of(*exprs: Expr) -> Filter:
    return Filter(exprs)


def and_(*exprs: Expr) -> Logical:
    return Logical(Operator.AND, exprs)


def or_(*exprs: Expr) -> Logical:
    return Logical(Operator.OR, exprs)


def nor(*exprs: Expr) -> Logical:
    return Logical(Operator.NOR, exprs)


def not_(field: str, expr: Expr) -> Leaf:
    """Negate the operator document of expr for a field: {field: {"$not": {...}}}."""
    return Leaf(Operator.NOT, field, _backend.render(expr))


def eq(field: str, value: Any) -> Leaf:
    return Leaf(Operator.EQ, field, value)


def ne(field: str, value: Any) -> Leaf:
    return Leaf(Operator.NE, field, value)


def gt(field: str, value: Any) -> Leaf:
    return Leaf(Operator.GT, field, value)


def gte(field: str, value: Any) -> Leaf:
    return Leaf(Operator.GTE, field, value)


def lt(field: str, value: Any) -> Leaf:
    return Leaf(Operator.LT, field, value)


def lte(field: str, value: Any) -> Leaf:
    return Leaf(Operator.LTE, field, value)


def in_(field: str, *values: Any) -> Leaf:
    return Leaf(Operator.IN, field, list(values))


def nin(field: str, *values: Any) -> Leaf:
    return Leaf(Operator.NIN, field, list(values))


def size(field: str, value: int) -> Leaf:
    if value < 0:
        raise InvalidFilterError(f"$size requires a non-negative length, got {value}")
    return Leaf(Operator.SIZE, field, value)


def exists(field: str, value: bool = True) -> Leaf:
    return Leaf(Operator.EXISTS, field, value)


def regex(field: str, pattern: str, *options: str) -> Leaf:
    """Match field against pattern; options are regex flags such as 'i'."""
    return Leaf(Operator.REGEX, field, RegexMatch(pattern, "".join(options)))


def all_(field: str, *values: Any) -> Leaf:
    return Leaf(Operator.ALL, field, list(values))


def elem_match(field: str, *exprs: Expr) -> Leaf:
    """
    Match array elements of field against every sub-expression.

    Named leaves constrain a sub-field of the element
    (elem_match("items", gt("qty", 1)) -> {"items": {"$elemMatch": {"qty": {"$gt": 1}}}}).
    Anonymous leaves and logical nodes apply to the element itself and
    are merged into the same sub-document
    (elem_match("scores", gte("", 80), lt("", 90))).
    """
    document: Dict[str, Any] = {}
    for expr in exprs:
        rendered = _backend.render(expr)
        if isinstance(expr, Leaf) and expr.is_named:
            document[expr.field] = rendered
        else:
            document.update(rendered)
    return Leaf(Operator.ELEM_MATCH, field, document)
