#!/usr/bin/env python3
"""
Tests for the fluent builder and document rendering.
"""

import pytest

from doc_criteria import parse_query
from doc_criteria.filters import (
    DocumentFilterBackend, Filter, InvalidFilterError, Leaf, Logical, Operator,
    UnsupportedOperatorError, render
)
from doc_criteria.filters import builder as f


class TestBuilder:
    """Test expression constructors."""

    def test_comparison_leaves(self):
        assert f.eq("a", 1) == Leaf(Operator.EQ, "a", 1)
        assert f.ne("a", 1).operator == Operator.NE
        assert f.gt("a", 1).operator == Operator.GT
        assert f.gte("a", 1).operator == Operator.GTE
        assert f.lt("a", 1).operator == Operator.LT
        assert f.lte("a", 1).operator == Operator.LTE

    def test_list_leaves(self):
        assert f.in_("a", 1, 2).value == [1, 2]
        assert f.nin("a", "x").value == ["x"]
        assert f.all_("tags", "a", "b") == Leaf(Operator.ALL, "tags", ["a", "b"])

    def test_logical_nodes(self):
        node = f.or_(f.eq("a", 1), f.eq("b", 2))
        assert isinstance(node, Logical)
        assert node.operator == Operator.OR
        assert len(node.children) == 2
        assert f.and_(f.eq("a", 1)).operator == Operator.AND
        assert f.nor(f.eq("a", 1)).operator == Operator.NOR

    def test_empty_logical_is_rejected(self):
        with pytest.raises(InvalidFilterError):
            f.or_()

    def test_logical_requires_logical_operator(self):
        with pytest.raises(InvalidFilterError):
            Logical(Operator.EQ, (f.eq("a", 1),))

    def test_negative_size_is_rejected(self):
        with pytest.raises(InvalidFilterError):
            f.size("tags", -1)

    def test_exists_defaults_to_true(self):
        assert f.exists("deleted_at").value is True

    def test_expressions_are_immutable(self):
        leaf = f.eq("a", 1)
        with pytest.raises(AttributeError):
            leaf.field = "b"


class TestDocumentRendering:
    """Test rendering expressions as filter documents."""

    def test_empty_filter(self, backend):
        """Test an empty filter renders to the match-everything document."""
        assert backend.convert(Filter()) == {}

    def test_named_leaf(self, backend):
        assert backend.convert(f.filter_of(f.gte("price", 5))) == {"price": {"$gte": 5}}

    def test_single_leaf_renders_operator_document(self, backend):
        assert backend.convert(f.gte("price", 5)) == {"$gte": 5}

    def test_several_top_level_leaves_merge(self, backend):
        document = backend.convert(f.filter_of(f.eq("a", 1), f.lt("b", 2)))
        assert document == {"a": {"$eq": 1}, "b": {"$lt": 2}}

    def test_anonymous_leaves_merge_flatly(self, backend):
        document = backend.convert(f.filter_of(f.gte("", 80), f.lt("", 90)))
        assert document == {"$gte": 80, "$lt": 90}

    def test_logical(self, backend):
        document = backend.convert(f.filter_of(f.or_(f.eq("a", 1), f.eq("b", 2))))
        assert document == {"$or": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]}

    def test_nested_logical(self, backend):
        document = backend.convert(f.filter_of(
            f.or_(f.and_(f.eq("a", 1), f.eq("b", 2)), f.eq("c", 3))
        ))
        assert document == {
            "$or": [
                {"$and": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]},
                {"c": {"$eq": 3}},
            ]
        }

    def test_logical_with_anonymous_child(self, backend):
        document = backend.convert(f.nor(f.eq("", 1), f.eq("b", 2)))
        assert document == {"$nor": [{"$eq": 1}, {"b": {"$eq": 2}}]}

    def test_regex_with_options(self, backend):
        document = backend.convert(f.filter_of(f.regex("sku", "^WSH", "i", "m")))
        assert document == {"sku": {"$regex": "^WSH", "$options": "im"}}

    def test_regex_without_options(self, backend):
        assert backend.convert(f.regex("sku", "^WSH")) == {"$regex": "^WSH"}

    def test_not(self, backend):
        document = backend.convert(f.filter_of(f.not_("price", f.gt("", 5))))
        assert document == {"price": {"$not": {"$gt": 5}}}

    def test_size_and_exists(self, backend):
        document = backend.convert(f.filter_of(f.size("tags", 3), f.exists("owner", False)))
        assert document == {"tags": {"$size": 3}, "owner": {"$exists": False}}

    def test_elem_match_named_leaves_nest(self, backend):
        """Test named sub-expressions constrain sub-fields of the element."""
        document = backend.convert(f.filter_of(
            f.elem_match("items", f.eq("sku", "A"), f.gt("qty", 1))
        ))
        assert document == {
            "items": {"$elemMatch": {"sku": {"$eq": "A"}, "qty": {"$gt": 1}}}
        }

    def test_elem_match_anonymous_leaves_merge(self, backend):
        """Test anonymous sub-expressions combine on the element itself."""
        document = backend.convert(f.filter_of(
            f.elem_match("scores", f.gte("", 80), f.lt("", 90))
        ))
        assert document == {"scores": {"$elemMatch": {"$gte": 80, "$lt": 90}}}

    def test_elem_match_with_logical(self, backend):
        document = backend.convert(f.filter_of(
            f.elem_match("items", f.or_(f.eq("sku", "A"), f.eq("sku", "B")))
        ))
        assert document == {
            "items": {"$elemMatch": {"$or": [{"sku": {"$eq": "A"}}, {"sku": {"$eq": "B"}}]}}
        }

    def test_module_level_render(self):
        assert render(f.filter_of(f.eq("a", 1))) == {"a": {"$eq": 1}}

    def test_unknown_node_is_rejected(self, backend):
        with pytest.raises(InvalidFilterError):
            backend.convert(Filter(("not an expression",)))

    def test_unsupported_operator(self):
        class EqualityOnlyBackend(DocumentFilterBackend):
            SUPPORTED_OPERATORS = frozenset({Operator.EQ, Operator.AND})

        backend = EqualityOnlyBackend()
        assert backend.convert(f.and_(f.eq("a", 1))) == {"$and": [{"a": {"$eq": 1}}]}
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            backend.convert(f.filter_of(f.and_(f.eq("a", 1), f.gt("b", 2))))
        assert exc_info.value.operator == Operator.GT
        assert exc_info.value.backend == "EqualityOnlyBackend"


class TestBuilderMatchesParser:
    """Test built and parsed filters render identically."""

    def test_equality(self, compile_filter, backend):
        parsed = compile_filter(
            "filters[0][0][field]=sku&filters[0][0][value]=ABC&filters[0][0][condition]=eq"
        )
        built = backend.convert(f.filter_of(f.eq("sku", "ABC")))
        assert parsed == built

    def test_grouped(self, compile_filter, backend):
        parsed = compile_filter(
            "filters[0][0][field]=sku&filters[0][0][value]=WSH&filters[0][0][condition]=like"
            "&filters[0][1][field]=sku&filters[0][1][value]=WP&filters[0][1][condition]=like"
            "&filters[1][0][field]=qty&filters[1][0][value]=1,2&filters[1][0][condition]=nin"
        )
        built = backend.convert(f.filter_of(f.and_(
            f.or_(f.regex("sku", "WSH", "i"), f.regex("sku", "WP", "i")),
            f.nin("qty", 1.0, 2.0),
        )))
        assert parsed == built

    def test_expression_trees_are_equal(self, parser):
        parsed = parser.parse_filter(parse_query(
            "filters[0][0][field]=a&filters[0][0][value]=x&filters[0][0][condition]=ne"
            "&filters[0][1][field]=b&filters[0][1][value]=2&filters[0][1][condition]=lt"
        ), "filters")
        assert parsed == f.filter_of(f.or_(f.ne("a", "x"), f.lt("b", 2.0)))


class TestRenderedValuesAreDetached:
    """Test rendered documents can be changed without touching the expression."""

    def test_list_values_are_copied(self, backend):
        leaf = f.in_("qty", 1, 2)
        document = backend.convert(f.filter_of(leaf))

        document["qty"]["$in"].append(3)
        assert leaf.value == [1, 2]
        assert backend.convert(f.filter_of(leaf)) == {"qty": {"$in": [1, 2]}}

    def test_elem_match_document_is_copied(self, backend):
        leaf = f.elem_match("items", f.eq("sku", "A"))
        document = backend.convert(leaf)

        document["$elemMatch"]["qty"] = {"$gt": 1}
        assert leaf.value == {"sku": {"$eq": "A"}}
