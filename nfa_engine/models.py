# models.py
#
# Graph data for the backtracking engine: matchers, transitions and states.
# No search logic lives here; see engine.py.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional

CharPredicate = Callable[[str], bool]

CHARACTER = "Character"
EPSILON = "Epsilon"


# =============================================================================
# Matchers
# =============================================================================

@dataclass(frozen=True, eq=False, slots=True)
class Matcher:
    """
    Guard on a transition. Exactly two kinds exist:

      Character  a predicate over one character; consumes it when satisfied
      Epsilon    always satisfied, consumes nothing

    Equality and hashing look at the tag only. Two Character matchers with
    different predicates compare equal, so never use a matcher on its own as
    a key for anything that must tell transitions apart.
    """
    tag: str
    predicate: Optional[CharPredicate] = None
    label: str = ""

    @classmethod
    def character(cls, predicate: CharPredicate, label: Optional[str] = None) -> Matcher:
        if not callable(predicate):
            raise TypeError(f"Character predicate must be callable, got {type(predicate).__name__}")
        if label is None:
            label = getattr(predicate, "__name__", "<predicate>")
        return cls(CHARACTER, predicate, label)

    @classmethod
    def literal(cls, ch: str) -> Matcher:
        if len(ch) != 1:
            raise ValueError(f"Literal matcher needs exactly one character, got {ch!r}")
        return cls(CHARACTER, ch.__eq__, repr(ch))

    @classmethod
    def epsilon(cls) -> Matcher:
        return _EPSILON

    @property
    def is_epsilon(self) -> bool:
        return self.tag == EPSILON

    @property
    def consumes(self) -> bool:
        return self.tag == CHARACTER

    def matches(self, text: str, offset: int) -> bool:
        if self.tag == EPSILON:
            return True
        if offset >= len(text):
            return False
        return bool(self.predicate(text[offset]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        return self.tag == other.tag

    def __hash__(self) -> int:
        return hash(self.tag)

    def __str__(self) -> str:
        if self.tag == EPSILON:
            return "ε"
        return f"{self.tag}({self.label})"


_EPSILON = Matcher(EPSILON, None, "ε")


def character_matcher(predicate: CharPredicate, label: Optional[str] = None) -> Matcher:
    return Matcher.character(predicate, label)


def literal_matcher(ch: str) -> Matcher:
    return Matcher.literal(ch)


def epsilon_matcher() -> Matcher:
    return _EPSILON


# =============================================================================
# Transitions and states
# =============================================================================

@dataclass(frozen=True, slots=True)
class Transition:
    target: str  # state name, resolved through the owning engine
    matcher: Matcher


@dataclass(eq=False, slots=True)
class State:
    """
    A named node of the graph.

    Identity is the name and nothing else: two State objects with the same
    name are equal and hash the same even if their transition lists differ.
    The engine relies on this to keep one State per name.

    start_groups / end_groups are reserved for submatch capture and are not
    read by the search.
    """
    name: str
    transitions: List[Transition] = field(default_factory=list)
    start_groups: List[str] = field(default_factory=list)
    end_groups: List[str] = field(default_factory=list)

    def add_transition(self, target: str, matcher: Matcher) -> Transition:
        # lowest priority
        t = Transition(target, matcher)
        self.transitions.append(t)
        return t

    def unshift_transition(self, target: str, matcher: Matcher) -> Transition:
        # highest priority
        t = Transition(target, matcher)
        self.transitions.insert(0, t)
        return t

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"State({self.name!r}, transitions={len(self.transitions)})"
