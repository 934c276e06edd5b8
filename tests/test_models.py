"""Tests for matchers, transitions and states."""

import pytest

from nfa_engine.models import (
    CHARACTER,
    EPSILON,
    Matcher,
    State,
    Transition,
    character_matcher,
    epsilon_matcher,
    literal_matcher,
)


class TestMatcher:
    def test_literal_matches_only_its_character(self):
        m = literal_matcher("a")
        assert m.matches("a", 0)
        assert not m.matches("b", 0)
        assert m.matches("ba", 1)

    def test_character_matcher_needs_input_at_offset(self):
        m = literal_matcher("a")
        assert not m.matches("", 0)
        assert not m.matches("a", 1)

    def test_predicate_matcher(self):
        m = character_matcher(str.isdigit, "digit")
        assert m.matches("x7", 1)
        assert not m.matches("x7", 0)
        assert m.label == "digit"

    def test_label_defaults_to_function_name(self):
        def vowel(c):
            return c in "aeiou"
        assert character_matcher(vowel).label == "vowel"

    def test_epsilon_always_matches(self):
        m = epsilon_matcher()
        assert m.matches("", 0)
        assert m.matches("abc", 3)
        assert m.is_epsilon
        assert not m.consumes

    def test_epsilon_is_shared(self):
        assert epsilon_matcher() is Matcher.epsilon()

    def test_tags(self):
        assert literal_matcher("a").tag == CHARACTER
        assert epsilon_matcher().tag == EPSILON
        assert literal_matcher("a").consumes

    def test_equality_is_by_tag_only(self):
        a = literal_matcher("a")
        b = character_matcher(lambda c: False)
        assert a == b
        assert hash(a) == hash(b)
        assert a != epsilon_matcher()
        assert len({a, b, epsilon_matcher()}) == 2

    def test_predicate_is_shared_not_copied(self):
        def is_x(c):
            return c == "x"
        m1 = character_matcher(is_x)
        m2 = character_matcher(is_x)
        assert m1.predicate is m2.predicate is is_x

    def test_literal_rejects_multiple_characters(self):
        with pytest.raises(ValueError):
            literal_matcher("ab")
        with pytest.raises(ValueError):
            literal_matcher("")

    def test_character_rejects_non_callable(self):
        with pytest.raises(TypeError):
            character_matcher("a")

    def test_str(self):
        assert str(epsilon_matcher()) == "ε"
        assert str(literal_matcher("a")) == "Character('a')"


class TestState:
    def test_equality_is_by_name(self):
        s1 = State("q0")
        s2 = State("q0")
        s2.add_transition("q1", literal_matcher("a"))
        assert s1 == s2
        assert hash(s1) == hash(s2)
        assert len({s1, s2}) == 1
        assert State("q0") != State("q1")

    def test_add_transition_appends(self):
        s = State("q0")
        s.add_transition("q1", literal_matcher("a"))
        s.add_transition("q2", epsilon_matcher())
        assert [t.target for t in s.transitions] == ["q1", "q2"]

    def test_unshift_transition_goes_first(self):
        s = State("q0")
        s.add_transition("q1", literal_matcher("a"))
        s.unshift_transition("q2", epsilon_matcher())
        assert [t.target for t in s.transitions] == ["q2", "q1"]

    def test_transition_holds_target_name(self):
        t = State("q0").add_transition("q1", epsilon_matcher())
        assert t == Transition("q1", epsilon_matcher())
        assert isinstance(t.target, str)

    def test_group_fields_default_empty(self):
        s = State("q0")
        assert s.start_groups == []
        assert s.end_groups == []
