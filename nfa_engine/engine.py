# engine.py
#
# Backtracking acceptance search over a graph of named states.
#
# The engine owns the states (keyed by name), the initial state name and the
# accepting state names. Build the graph first, then call decide(); decide()
# never touches the graph and keeps its search state local to the call.
#
# Search notes:
#   - Explicit LIFO stack instead of recursion, so deep graphs cannot blow the
#     interpreter stack.
#   - Successors are pushed in reverse priority order; the highest priority
#     transition (index 0) is therefore popped next.
#   - Epsilon loop guard: every branch carries the set of epsilon edges taken
#     since the last consumed character. An edge already in that set is not
#     taken again. The key is the edge (source, target, tag), not the bare
#     Epsilon tag, so unrelated epsilon edges never block each other.

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .errors import EngineConfigurationError, SearchBudgetExceeded, StateNotFoundError
from .models import Matcher, State, Transition

logger = logging.getLogger(__name__)

EdgeKey = Tuple[str, str, str]

_NO_EDGES: FrozenSet[EdgeKey] = frozenset()


@dataclass(frozen=True, slots=True)
class SearchFrame:
    state: str
    offset: int
    epsilon_memory: FrozenSet[EdgeKey] = _NO_EDGES


class NFAEngine:
    def __init__(
        self,
        initial: Optional[str] = None,
        accepting: Iterable[str] = (),
        max_steps: Optional[int] = None,
    ) -> None:
        if max_steps is not None and max_steps <= 0:
            raise ValueError("max_steps must be > 0")
        self._states: Dict[str, State] = {}
        self._initial: Optional[str] = None
        self._accepting: Dict[str, None] = {}  # ordered set
        self.max_steps = max_steps

        if initial is not None:
            self.create_state(initial)
            self._initial = initial
        if accepting:
            self.set_accepting_states(accepting)

    # ----------------------------
    # Construction
    # ----------------------------
    def create_state(self, name: str) -> State:
        """Register a new empty state. An existing state with that name wins and is returned."""
        existing = self._states.get(name)
        if existing is not None:
            return existing
        state = State(name)
        self._states[name] = state
        logger.debug("created state %r", name)
        return state

    def declare_states(self, names: Iterable[str]) -> List[State]:
        return [self.create_state(n) for n in names]

    def set_initial_state(self, name: str) -> None:
        if name not in self._states:
            raise StateNotFoundError(name, role="initial state")
        self._initial = name

    def set_accepting_states(self, names: Iterable[str]) -> None:
        """Replace the accepting set. Names not yet declared are created."""
        accepting: Dict[str, None] = {}
        for name in names:
            self.create_state(name)
            accepting[name] = None
        self._accepting = accepting

    def add_transition(self, from_state: str, to_state: str, matcher: Matcher) -> Transition:
        source = self._source(from_state)
        self.create_state(to_state)
        t = source.add_transition(to_state, matcher)
        logger.debug("transition %s -> %s on %s", from_state, to_state, matcher)
        return t

    def unshift_transition(self, from_state: str, to_state: str, matcher: Matcher) -> Transition:
        source = self._source(from_state)
        self.create_state(to_state)
        t = source.unshift_transition(to_state, matcher)
        logger.debug("transition %s -> %s on %s (priority 0)", from_state, to_state, matcher)
        return t

    def _source(self, name: str) -> State:
        state = self._states.get(name)
        if state is None:
            raise StateNotFoundError(name, role="source state")
        return state

    # ----------------------------
    # Queries
    # ----------------------------
    def has_state(self, name: str) -> bool:
        return name in self._states

    def get_state(self, name: str) -> Optional[State]:
        return self._states.get(name)

    def state_count(self) -> int:
        return len(self._states)

    @property
    def initial_state(self) -> Optional[str]:
        return self._initial

    @property
    def accepting_states(self) -> Tuple[str, ...]:
        return tuple(self._accepting)

    @property
    def states(self) -> Tuple[State, ...]:
        return tuple(self._states.values())

    def is_accepting(self, name: str) -> bool:
        return name in self._accepting

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return (
            f"NFAEngine(states={len(self._states)}, initial={self._initial!r}, "
            f"accepting={list(self._accepting)!r})"
        )

    # ----------------------------
    # Decision
    # ----------------------------
    def decide(self, text: str) -> bool:
        if self._initial is None:
            raise EngineConfigurationError("No initial state set")

        states = self._states
        accepting = self._accepting
        limit = self.max_steps

        stack: List[SearchFrame] = [SearchFrame(self._initial, 0)]
        steps = 0

        while stack:
            frame = stack.pop()
            steps += 1
            if limit is not None and steps > limit:
                raise SearchBudgetExceeded(limit)

            if frame.state in accepting:
                logger.debug("accepted %r at offset %d after %d steps", text, frame.offset, steps)
                return True

            transitions = states[frame.state].transitions
            for t in reversed(transitions):
                nxt = self._successor(frame, t, text)
                if nxt is not None:
                    stack.append(nxt)

        logger.debug("rejected %r after %d steps", text, steps)
        return False

    @staticmethod
    def _successor(frame: SearchFrame, t: Transition, text: str) -> Optional[SearchFrame]:
        if t.matcher.is_epsilon:
            key = (frame.state, t.target, t.matcher.tag)
            if key in frame.epsilon_memory:
                return None
            return SearchFrame(t.target, frame.offset, frame.epsilon_memory | {key})

        if t.matcher.matches(text, frame.offset):
            # a consumed character starts a fresh epsilon memory
            return SearchFrame(t.target, frame.offset + 1)
        return None
