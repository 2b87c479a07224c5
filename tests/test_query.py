"""
tests/test_query.py

Tests for parsing "Au(111)"-style surface queries.
"""

from __future__ import annotations

import pytest


class TestParseQuery:

    @pytest.mark.parametrize("query,element,miller", [
        ("Au(111)", "Au", "111"),
        ("Cu(100)", "Cu", "100"),
        ("Pt(110)", "Pt", "110"),
        ("Pt (1 1 1)", "Pt", "111"),
        ("  Ni(100)  ", "Ni", "100"),
        ("Ag", "Ag", "111"),
    ])
    def test_element_and_miller(self, query, element, miller):
        from slabsite.structure.query import parse_query
        parsed = parse_query(query)
        assert parsed.element == element
        assert parsed.miller == miller

    def test_garbage_defaults_to_copper_111(self):
        from slabsite.structure.query import parse_query
        parsed = parse_query("garbage")
        assert parsed.element == "Cu"
        assert parsed.miller == "111"
        assert not parsed.element_matched
        assert not parsed.miller_matched

    @pytest.mark.parametrize("query", ["", None, "   "])
    def test_empty_query(self, query):
        from slabsite.structure.query import parse_query
        parsed = parse_query(query)
        assert (parsed.element, parsed.miller) == ("Cu", "111")

    def test_leading_miller_has_no_element(self):
        from slabsite.structure.query import parse_query
        parsed = parse_query("(1 1 1) Pt")
        assert parsed.element == "Cu"
        assert parsed.miller == "111"
        assert parsed.miller_matched

    def test_unknown_symbol_is_still_parsed(self):
        from slabsite.structure.query import parse_query
        parsed = parse_query("Zz(100)")
        assert parsed.element == "Zz"
        assert parsed.element_matched

    def test_lowercase_symbol_is_not_an_element(self):
        from slabsite.structure.query import parse_query
        assert parse_query("au(111)").element == "Cu"

    def test_miller_index_display_form(self):
        from slabsite.structure.query import parse_query
        assert parse_query("Au(1 0 0)").miller_index == "(100)"
