"""Tests for the pattern parser and graph builder."""

import pytest

from nfa_engine import PatternSyntaxError, compile_pattern, parse_pattern
from nfa_engine.compiler import (
    ESCAPE_PREDICATES,
    CharClass,
    CharItem,
    Concatenation,
    Literal,
    Quantifier,
    RangeItem,
)


@pytest.mark.parametrize("pattern, text, expected", [
    # single character classes
    (r"\d", "apple123", True),
    (r"\d", "apple", False),
    (r"\d", "---", False),
    (r"\w", "apple", True),
    (r"\w", "---", False),
    (r"\w", "alph4-num3ric", True),
    ("f", "f", True),
    ("f", "a", False),
    ("f", "", False),
    # anchoring
    ("abc", "xxabc", True),
    ("^abc", "abcdef", True),
    ("^abc", "xabc", False),
    # alternation and groups
    ("a(b|c)d", "acd", True),
    ("a(b|c)d", "aed", False),
    ("^(cat|dog)s", "dogs", True),
    ("^(cat|dog)s", "cows", False),
    # quantifiers
    ("ca+t", "caaat", True),
    ("ca+t", "ct", False),
    ("ca?t", "ct", True),
    ("ca*t", "ct", True),
    ("^a{2,3}b", "aab", True),
    ("^a{2,3}b", "ab", False),
    ("^a{2,3}b", "aaaab", False),
    ("^a{2}b", "aab", True),
    ("^a{2,}b", "aaaaab", True),
    ("^a{2,}b", "ab", False),
    ("^a*?b", "aaab", True),
    ("^a+?b", "b", False),
    # classes
    ("[abc]", "xxb", True),
    ("[^abc]", "abc", False),
    ("[^abc]", "abcd", True),
    (r"[a-z]+\d", "Xy7", True),
    ("[+-]", "-", True),
    ("[+-]", "+", True),
    ("[]]", "]", True),
    (r"[\d_]", "a_", True),
    # escapes and dot
    (r"a\.b", "a.b", True),
    (r"a\.b", "axb", False),
    ("^.+x", "abx", True),
    (".", "\n", False),
    (r"\s", "a b", True),
    (r"\S", "   ", False),
    (r"\t", "a\tb", True),
    # epsilon cycles from nested stars
    ("^(a*)*b", "aaab", True),
    ("^(a*)*b", "aaac", False),
    ("^(a|)*b", "aab", True),
    ("^()*x", "x", True),
])
def test_compile_and_decide(pattern, text, expected):
    assert compile_pattern(pattern).decide(text) is expected


@pytest.mark.parametrize("pattern", [
    "(?=a)",
    "a$",
    "a^",
    "*a",
    "a|+",
    "(ab",
    "ab)",
    "[ab",
    "a{3,1}",
    "a{x}",
    "\\",
    "[z-a]",
    r"[a-\d]",
])
def test_syntax_errors(pattern):
    with pytest.raises(PatternSyntaxError):
        compile_pattern(pattern)


class TestParser:
    def test_lazy_flag(self):
        assert parse_pattern("a*?").root == Quantifier(Literal("a"), 0, None, True)
        assert parse_pattern("a{1,2}").root == Quantifier(Literal("a"), 1, 2, False)

    def test_anchor_flag(self):
        assert parse_pattern("^a").anchored
        assert not parse_pattern("a").anchored

    def test_concatenation_is_flattened(self):
        root = parse_pattern("ab(cd)").root
        assert isinstance(root, Concatenation)
        assert len(root.parts) == 3

    def test_trailing_dash_in_class_is_literal(self):
        root = parse_pattern("[a-c-]").root
        assert root == CharClass(False, [RangeItem("a", "c"), CharItem("-")])

    def test_error_position(self):
        with pytest.raises(PatternSyntaxError) as exc:
            parse_pattern("ab$")
        assert exc.value.position == 2


class TestGraph:
    def test_anchored_graph_shape(self):
        e = compile_pattern("^a")
        assert [s.name for s in e.states] == ["q0", "q1"]
        assert e.initial_state == "q0"
        assert e.accepting_states == ("q1",)

    def test_unanchored_graph_has_scan_state(self):
        e = compile_pattern("a")
        assert e.initial_state == "q2"
        scan = e.get_state("q2")
        assert scan.transitions[0].matcher.is_epsilon
        assert scan.transitions[0].target == "q0"
        assert scan.transitions[1].target == "q2"

    def test_lazy_star_prefers_exit(self):
        # q0/q1: empty prefix, q2/q3: star entry/exit, q4/q5: body
        greedy = compile_pattern("^a*")
        lazy = compile_pattern("^a*?")
        assert [t.target for t in greedy.get_state("q2").transitions] == ["q4", "q3"]
        assert [t.target for t in lazy.get_state("q2").transitions] == ["q3", "q4"]
        assert [t.target for t in greedy.get_state("q5").transitions] == ["q4", "q3"]
        assert [t.target for t in lazy.get_state("q5").transitions] == ["q3", "q4"]

    def test_escape_predicates_are_shared(self):
        e = compile_pattern(r"^\d\d\d")
        preds = {
            t.matcher.predicate
            for s in e.states
            for t in s.transitions
            if not t.matcher.is_epsilon
        }
        assert preds == {ESCAPE_PREDICATES["d"]}

    def test_budget_is_passed_through(self):
        e = compile_pattern("a", max_steps=10)
        assert e.max_steps == 10
