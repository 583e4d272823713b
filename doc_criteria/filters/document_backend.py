#!/usr/bin/env python3
"""
Document backend for filter expressions.
Converts Filter trees to the nested dict/list filter documents that
MongoDB-style document stores accept.
"""

from typing import Any, Dict, List, Union

from .base import (
    Expr, Filter, FilterBackend, InvalidFilterError, Leaf, Logical,
    Operator, RegexMatch
)


class DocumentFilterBackend(FilterBackend):
    """
    Converts Filter trees to filter documents.

    Leaves render as operator documents ({"$gte": 5}), logical nodes as
    an operator keyed list ({"$or": [...]}), and a Filter merges its
    top-level expressions into one document.
    """

    SUPPORTED_OPERATORS = frozenset(Operator)

    def convert(self, expression: Union[Filter, Leaf, Logical]) -> Dict[str, Any]:
        """
        Convert a Filter or a single expression to a filter document.

        Args:
            expression: The filter or expression

        Returns:
            Filter document; an empty Filter yields {} (matches everything)
        """
        self.validate_expression(expression)

        if isinstance(expression, Filter):
            return self._convert_filter(expression)
        return self.render(expression)

    def supports_operator(self, operator: Operator) -> bool:
        """Check if the document backend supports an operator."""
        return operator in self.SUPPORTED_OPERATORS

    def render(self, expr: Expr) -> Dict[str, Any]:
        """Render one expression to its operator document."""
        if isinstance(expr, Leaf):
            return self._render_leaf(expr)
        elif isinstance(expr, Logical):
            return {expr.operator.value: self._render_children(expr)}
        else:
            raise InvalidFilterError(f"Unknown expression type: {type(expr).__name__}")

    def _convert_filter(self, filter_: Filter) -> Dict[str, Any]:
        """Merge the top-level expressions of a filter."""
        result: Dict[str, Any] = {}
        for expr in filter_:
            if isinstance(expr, Leaf) and expr.is_named:
                result[expr.field] = self._render_leaf(expr)
            else:
                # Anonymous leaves and logical nodes contribute their keys
                result.update(self.render(expr))
        return result

    def _render_children(self, logical: Logical) -> List[Dict[str, Any]]:
        """Render the children of a logical node, wrapping named leaves."""
        rendered = []
        for child in logical.children:
            if isinstance(child, Leaf) and child.is_named:
                rendered.append({child.field: self._render_leaf(child)})
            else:
                rendered.append(self.render(child))
        return rendered

    def _render_leaf(self, leaf: Leaf) -> Dict[str, Any]:
        """Render a leaf to {operator: value}."""
        if leaf.operator == Operator.REGEX and isinstance(leaf.value, RegexMatch):
            document = {leaf.operator.value: leaf.value.pattern}
            if leaf.value.options:
                document["$options"] = leaf.value.options
            return document
        value = leaf.value
        # Rendered documents must not share mutable values with the tree
        if isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        return {leaf.operator.value: value}


_default_backend = DocumentFilterBackend()


def render(expression: Union[Filter, Leaf, Logical]) -> Dict[str, Any]:
    """Render a Filter or expression with the shared document backend."""
    return _default_backend.convert(expression)
