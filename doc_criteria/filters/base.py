#!/usr/bin/env python3
"""
Filter expression model.
Provides the operator table, the two expression node types and the
backend abstraction that turns expression trees into a store's native
query format.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple, Union

from ..exceptions import CriteriaError


class Operator(Enum):
    """Document-store query operators."""
    # Comparison
    EQ = "$eq"
    NE = "$ne"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    IN = "$in"
    NIN = "$nin"

    # Logical
    AND = "$and"
    OR = "$or"
    NOR = "$nor"
    NOT = "$not"

    # Array
    ALL = "$all"
    SIZE = "$size"
    ELEM_MATCH = "$elemMatch"

    # Element
    EXISTS = "$exists"

    # Evaluation
    REGEX = "$regex"

    @property
    def category(self) -> str:
        """Operator family: comparison, logical, array, element or evaluation."""
        return _CATEGORIES[self]

    def is_logical(self) -> bool:
        """Check if the operator combines sub-expressions."""
        return self in LOGICAL_OPERATORS

    @classmethod
    def from_string(cls, value: str) -> Optional['Operator']:
        """Convert an operator token such as '$gte' to an operator."""
        for op in cls:
            if op.value == value:
                return op
        return None


LOGICAL_OPERATORS = frozenset({Operator.AND, Operator.OR, Operator.NOR, Operator.NOT})

_CATEGORIES = {
    Operator.EQ: "comparison",
    Operator.NE: "comparison",
    Operator.GT: "comparison",
    Operator.GTE: "comparison",
    Operator.LT: "comparison",
    Operator.LTE: "comparison",
    Operator.IN: "comparison",
    Operator.NIN: "comparison",
    Operator.AND: "logical",
    Operator.OR: "logical",
    Operator.NOR: "logical",
    Operator.NOT: "logical",
    Operator.ALL: "array",
    Operator.SIZE: "array",
    Operator.ELEM_MATCH: "array",
    Operator.EXISTS: "element",
    Operator.REGEX: "evaluation",
}


@dataclass(frozen=True)
class RegexMatch:
    """A regular expression value with its option flags (e.g. 'i')."""
    pattern: str
    options: str = ""


@dataclass(frozen=True)
class Leaf:
    """
    A single field condition.
    An empty field marks an anonymous leaf, used nested inside array
    constructs such as $elemMatch.
    """
    operator: Operator
    field: str
    value: Any

    @property
    def is_named(self) -> bool:
        return len(self.field) > 0

    def __repr__(self):
        if self.field:
            return f"{self.field} {self.operator.value} {self.value!r}"
        return f"{self.operator.value}: {self.value!r}"


@dataclass(frozen=True)
class Logical:
    """
    An operator applied to an ordered, non-empty list of sub-expressions.
    """
    operator: Operator
    children: Tuple['Expr', ...]

    def __post_init__(self):
        if not self.operator.is_logical():
            raise InvalidFilterError(f"{self.operator.value} is not a logical operator")
        if not self.children:
            raise InvalidFilterError(f"{self.operator.value} requires at least one expression")
        # Accept any iterable of children but store a tuple
        object.__setattr__(self, 'children', tuple(self.children))

    def __repr__(self):
        return f"{self.operator.value}({list(self.children)})"


Expr = Union[Leaf, Logical]


@dataclass(frozen=True)
class Filter:
    """
    Top-level expressions combined by implicit conjunction.
    An empty filter matches everything.
    """
    expressions: Tuple[Expr, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'expressions', tuple(self.expressions))

    def __iter__(self) -> Iterator[Expr]:
        return iter(self.expressions)

    def __len__(self) -> int:
        return len(self.expressions)

    def __bool__(self) -> bool:
        return bool(self.expressions)


class FilterBackend(ABC):
    """
    Abstract base class for filter backends.
    Each store implements this to convert expression trees into
    its native query format.
    """

    @abstractmethod
    def convert(self, expression: Union[Filter, Leaf, Logical]) -> Any:
        """
        Convert an expression tree to the backend's native format.

        Args:
            expression: A filter or a single expression

        Returns:
            Backend-specific query object
        """
        pass

    @abstractmethod
    def supports_operator(self, operator: Operator) -> bool:
        """
        Check if this backend supports a specific operator.

        Args:
            operator: The operator to check

        Returns:
            True if supported, False otherwise
        """
        pass

    def validate_expression(self, expression: Union[Filter, Leaf, Logical]) -> None:
        """
        Validate that all operators in the expression are supported.

        Raises:
            UnsupportedOperatorError: If an unsupported operator is found
            InvalidFilterError: If a node is not an expression
        """
        if isinstance(expression, Filter):
            for expr in expression:
                self._validate_recursive(expr)
        else:
            self._validate_recursive(expression)

    def _validate_recursive(self, expr: Expr) -> None:
        """Recursively validate all operators."""
        if isinstance(expr, Leaf):
            if not self.supports_operator(expr.operator):
                raise UnsupportedOperatorError(expr.operator, self.__class__.__name__)
        elif isinstance(expr, Logical):
            if not self.supports_operator(expr.operator):
                raise UnsupportedOperatorError(expr.operator, self.__class__.__name__)
            for child in expr.children:
                self._validate_recursive(child)
        else:
            raise InvalidFilterError(f"Unknown expression type: {type(expr).__name__}")


class FilterError(CriteriaError):
    """Base exception for filter-related errors."""
    pass


class UnsupportedOperatorError(FilterError):
    """Raised when a backend doesn't support an operator."""
    def __init__(self, operator: Operator, backend: str):
        super().__init__(f"Operator {operator.value} is not supported by {backend}")
        self.operator = operator
        self.backend = backend


class InvalidFilterError(FilterError):
    """Raised when an expression is malformed."""
    pass
