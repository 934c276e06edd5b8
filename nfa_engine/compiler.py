# compiler.py
#
# Pattern compiler: text pattern -> AST -> NFAEngine graph.
#
# Supported:
#   - literals, '.', escapes \d \D \w \W \s \S \n \r \t \f \v
#   - bracket classes [...] and [^...] with ranges and escapes
#   - non-capturing groups (...), alternation |
#   - quantifiers * + ? {m} {m,} {m,n}, plus lazy forms (*? +? ?? {m,n}?)
#   - a leading '^' (otherwise the pattern may match anywhere in the input)
#
# Not supported (rejected with PatternSyntaxError):
#   - "(?" constructs, '$', '^' anywhere except the very start
#
# States are named q0, q1, ... in creation order.

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Tuple, Union

from .engine import NFAEngine
from .errors import PatternSyntaxError
from .models import CharPredicate, Matcher, character_matcher, epsilon_matcher, literal_matcher

logger = logging.getLogger(__name__)


# =============================================================================
# AST definitions
# =============================================================================

class Node:
    pass


@dataclass(frozen=True)
class Alternation(Node):
    options: List[Node]


@dataclass(frozen=True)
class Concatenation(Node):
    parts: List[Node]  # empty => ε


@dataclass(frozen=True)
class Quantifier(Node):
    expr: Node
    min_count: int
    max_count: Optional[int]  # None => unbounded
    lazy: bool = False


@dataclass(frozen=True)
class Group(Node):
    expr: Node


@dataclass(frozen=True)
class Literal(Node):
    ch: str


@dataclass(frozen=True)
class Dot(Node):
    pass


@dataclass(frozen=True)
class EscapeClass(Node):
    code: str  # d D w W s S


CharClassItem = Union["CharItem", "RangeItem", "EscapeItem"]


@dataclass(frozen=True)
class CharItem:
    ch: str


@dataclass(frozen=True)
class RangeItem:
    start: str
    end: str


@dataclass(frozen=True)
class EscapeItem:
    code: str


@dataclass(frozen=True)
class CharClass(Node):
    negated: bool
    items: List[CharClassItem]


@dataclass(frozen=True)
class Pattern:
    root: Node
    anchored: bool


# =============================================================================
# Parser
# =============================================================================

CLASS_ESCAPES = "dDwWsS"
CONTROL_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "f": "\f", "v": "\v"}


class Parser:
    # Grammar:
    #   pattern       := '^'? alternation
    #   alternation   := concatenation ('|' concatenation)*
    #   concatenation := repetition*            # ε allowed
    #   repetition    := atom (quantifier '?'?)?
    #   quantifier    := '*' | '+' | '?' | '{m}' | '{m,}' | '{m,n}'
    #   atom          := literal | '.' | escape | group | charclass

    def __init__(self, text: str):
        self.text = text
        self.i = 0

    def parse(self) -> Pattern:
        anchored = False
        if self._peek() == "^":
            self._eat("^")
            anchored = True
        node = self._parse_alternation()
        if not self._eof():
            raise PatternSyntaxError(f"Unexpected {self._peek()!r}", self.i)
        return Pattern(_simplify(node), anchored)

    def _parse_alternation(self) -> Node:
        options = [self._parse_concatenation()]
        while self._peek() == "|":
            self._eat("|")
            options.append(self._parse_concatenation())
        if len(options) == 1:
            return options[0]
        return Alternation(options)

    def _parse_concatenation(self) -> Node:
        parts: List[Node] = []
        while True:
            c = self._peek()
            if c is None or c in ")|":
                break
            parts.append(self._parse_repetition())
        if len(parts) == 1:
            return parts[0]
        return Concatenation(parts)

    def _parse_repetition(self) -> Node:
        atom = self._parse_atom()
        c = self._peek()
        if c is not None and c in "*+?":
            self.i += 1
            bounds = {"*": (0, None), "+": (1, None), "?": (0, 1)}[c]
        elif c == "{":
            bounds = self._parse_brace_quantifier()
        else:
            return atom

        lazy = False
        if self._peek() == "?":
            self._eat("?")
            lazy = True
        return Quantifier(atom, bounds[0], bounds[1], lazy)

    def _parse_brace_quantifier(self) -> Tuple[int, Optional[int]]:
        self._eat("{")
        m = self._parse_int()
        if self._peek() == "}":
            self._eat("}")
            return m, m
        self._eat(",")
        if self._peek() == "}":
            self._eat("}")
            return m, None
        n = self._parse_int()
        self._eat("}")
        if n < m:
            raise PatternSyntaxError(f"Invalid quantifier range {{{m},{n}}}: n < m", self.i)
        return m, n

    def _parse_atom(self) -> Node:
        c = self._peek()
        if c is None:
            raise PatternSyntaxError("Unexpected end of pattern", self.i)

        if c == "(":
            return self._parse_group()
        if c == "[":
            return self._parse_charclass()
        if c == "\\":
            return self._parse_escape()
        if c == ".":
            self._eat(".")
            return Dot()
        if c == "^":
            raise PatternSyntaxError("'^' is only supported at the start of the pattern", self.i)
        if c == "$":
            raise PatternSyntaxError("End anchor '$' is not supported", self.i)
        if c in "*+?{":
            raise PatternSyntaxError(f"Quantifier {c!r} has nothing to repeat", self.i)
        if c in "|)":
            raise PatternSyntaxError(f"Unexpected {c!r}", self.i)

        self.i += 1
        return Literal(c)

    def _parse_group(self) -> Node:
        start = self.i
        self._eat("(")
        if self._peek() == "?":
            raise PatternSyntaxError("'(?' constructs are not supported", start)
        expr = self._parse_alternation()
        if self._peek() != ")":
            raise PatternSyntaxError("Unclosed '('", start)
        self._eat(")")
        return Group(expr)

    def _parse_escape(self) -> Node:
        c = self._read_escape()
        if c in CLASS_ESCAPES:
            return EscapeClass(c)
        return Literal(CONTROL_ESCAPES.get(c, c))

    def _read_escape(self) -> str:
        self._eat("\\")
        c = self._peek()
        if c is None:
            raise PatternSyntaxError("Dangling backslash", self.i - 1)
        self.i += 1
        return c

    def _parse_charclass(self) -> Node:
        start = self.i
        self._eat("[")
        negated = False
        if self._peek() == "^":
            negated = True
            self._eat("^")

        items: List[CharClassItem] = []
        first = True
        while True:
            c = self._peek()
            if c is None:
                raise PatternSyntaxError("Unclosed '['", start)
            if c == "]" and not first:
                self._eat("]")
                break
            first = False
            items.append(self._parse_charclass_item())

        return CharClass(negated, items)

    def _parse_charclass_item(self) -> CharClassItem:
        if self._peek() == "\\":
            esc = self._read_escape()
            if esc in CLASS_ESCAPES:
                return EscapeItem(esc)
            left = CharItem(CONTROL_ESCAPES.get(esc, esc))
        else:
            left = CharItem(self.text[self.i])
            self.i += 1

        # '-' right before ']' is a literal dash, handled by the caller's loop
        if self._peek() != "-" or self._peek_ahead(1) in ("]", None):
            return left

        self._eat("-")
        if self._peek() == "\\":
            esc = self._read_escape()
            if esc in CLASS_ESCAPES:
                raise PatternSyntaxError(f"Range cannot end in \\{esc}", self.i)
            right = CONTROL_ESCAPES.get(esc, esc)
        else:
            right = self.text[self.i]
            self.i += 1

        if ord(right) < ord(left.ch):
            raise PatternSyntaxError(f"Invalid range {left.ch!r}-{right!r}", self.i)
        return RangeItem(left.ch, right)

    def _parse_int(self) -> int:
        start = self.i
        while (c := self._peek()) is not None and c.isdigit():
            self.i += 1
        if self.i == start:
            raise PatternSyntaxError("Expected integer", self.i)
        return int(self.text[start:self.i])

    def _peek(self) -> Optional[str]:
        if self.i >= len(self.text):
            return None
        return self.text[self.i]

    def _peek_ahead(self, k: int) -> Optional[str]:
        j = self.i + k
        if j >= len(self.text):
            return None
        return self.text[j]

    def _eat(self, ch: str) -> None:
        if self._peek() != ch:
            raise PatternSyntaxError(f"Expected {ch!r}, found {self._peek()!r}", self.i)
        self.i += 1

    def _eof(self) -> bool:
        return self.i >= len(self.text)


def _simplify(node: Node) -> Node:
    if isinstance(node, Alternation):
        flat: List[Node] = []
        for opt in node.options:
            sopt = _simplify(opt)
            if isinstance(sopt, Alternation):
                flat.extend(sopt.options)
            else:
                flat.append(sopt)
        return Alternation(flat)

    if isinstance(node, Concatenation):
        parts: List[Node] = []
        for part in node.parts:
            spart = _simplify(part)
            if isinstance(spart, Concatenation):
                parts.extend(spart.parts)
            else:
                parts.append(spart)
        if len(parts) == 1:
            return parts[0]
        return Concatenation(parts)

    if isinstance(node, Quantifier):
        return Quantifier(_simplify(node.expr), node.min_count, node.max_count, node.lazy)

    if isinstance(node, Group):
        return Group(_simplify(node.expr))

    return node


def parse_pattern(pattern: str) -> Pattern:
    return Parser(pattern).parse()


# =============================================================================
# Character predicates
# =============================================================================

def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_word(c: str) -> bool:
    return c.isalnum() or c == "_"


def is_space(c: str) -> bool:
    return c.isspace()


def is_not_newline(c: str) -> bool:
    return c != "\n"


def any_char(c: str) -> bool:
    return True


def _negate(predicate: CharPredicate) -> CharPredicate:
    def negated(c: str) -> bool:
        return not predicate(c)
    negated.__name__ = f"not_{predicate.__name__}"
    return negated


# One predicate object per escape; every transition for \d shares is_digit.
ESCAPE_PREDICATES: Dict[str, CharPredicate] = {
    "d": is_digit,
    "D": _negate(is_digit),
    "w": is_word,
    "W": _negate(is_word),
    "s": is_space,
    "S": _negate(is_space),
}


def charclass_predicate(cc: CharClass) -> CharPredicate:
    chars = frozenset(it.ch for it in cc.items if isinstance(it, CharItem))
    ranges = tuple((it.start, it.end) for it in cc.items if isinstance(it, RangeItem))
    escapes = tuple(ESCAPE_PREDICATES[it.code] for it in cc.items if isinstance(it, EscapeItem))
    negated = cc.negated

    def in_class(c: str) -> bool:
        hit = (
            c in chars
            or any(lo <= c <= hi for lo, hi in ranges)
            or any(p(c) for p in escapes)
        )
        return hit != negated

    return in_class


# =============================================================================
# Graph construction
# =============================================================================

@dataclass(frozen=True)
class Fragment:
    start: str
    accept: str


class GraphBuilder:
    def __init__(self, engine: Optional[NFAEngine] = None):
        self.engine = engine if engine is not None else NFAEngine()
        self._counter = 0
        self._escape_matchers: Dict[str, Matcher] = {}
        self._dot = character_matcher(is_not_newline, ".")

    def build(self, pattern: Pattern) -> NFAEngine:
        frag = self._build_node(pattern.root)
        start = frag.start
        if not pattern.anchored:
            # scan: try the pattern here first, else skip one character
            scan = self._new_state()
            self.engine.add_transition(scan, frag.start, epsilon_matcher())
            self.engine.add_transition(scan, scan, character_matcher(any_char, "any"))
            start = scan
        self.engine.set_initial_state(start)
        self.engine.set_accepting_states([frag.accept])
        return self.engine

    def _new_state(self) -> str:
        name = f"q{self._counter}"
        self._counter += 1
        self.engine.create_state(name)
        return name

    def _epsilon(self, src: str, dst: str, first: bool = False) -> None:
        if first:
            self.engine.unshift_transition(src, dst, epsilon_matcher())
        else:
            self.engine.add_transition(src, dst, epsilon_matcher())

    def _atom(self, matcher: Matcher) -> Fragment:
        s = self._new_state()
        a = self._new_state()
        self.engine.add_transition(s, a, matcher)
        return Fragment(s, a)

    def _empty(self) -> Fragment:
        s = self._new_state()
        a = self._new_state()
        self._epsilon(s, a)
        return Fragment(s, a)

    def _build_node(self, node: Node) -> Fragment:
        if isinstance(node, Literal):
            return self._atom(literal_matcher(node.ch))

        if isinstance(node, Dot):
            return self._atom(self._dot)

        if isinstance(node, EscapeClass):
            return self._atom(self._escape_matcher(node.code))

        if isinstance(node, CharClass):
            return self._atom(character_matcher(charclass_predicate(node), _describe_class(node)))

        if isinstance(node, Group):
            return self._build_node(node.expr)

        if isinstance(node, Concatenation):
            if not node.parts:
                return self._empty()
            frag = self._build_node(node.parts[0])
            for part in node.parts[1:]:
                right = self._build_node(part)
                self._epsilon(frag.accept, right.start)
                frag = Fragment(frag.start, right.accept)
            return frag

        if isinstance(node, Alternation):
            s = self._new_state()
            a = self._new_state()
            for opt in node.options:
                of = self._build_node(opt)
                self._epsilon(s, of.start)
                self._epsilon(of.accept, a)
            return Fragment(s, a)

        if isinstance(node, Quantifier):
            return self._build_repeat(node)

        raise TypeError(f"Unsupported AST node: {type(node).__name__}")

    def _escape_matcher(self, code: str) -> Matcher:
        m = self._escape_matchers.get(code)
        if m is None:
            m = character_matcher(ESCAPE_PREDICATES[code], f"\\{code}")
            self._escape_matchers[code] = m
        return m

    def _build_star(self, expr: Node, lazy: bool) -> Fragment:
        # greedy: loop edges before exit edges; lazy: exit edges unshifted to the front
        s = self._new_state()
        a = self._new_state()
        body = self._build_node(expr)
        self._epsilon(s, body.start)
        self._epsilon(body.accept, body.start)
        self._epsilon(s, a, first=lazy)
        self._epsilon(body.accept, a, first=lazy)
        return Fragment(s, a)

    def _build_repeat(self, q: Quantifier) -> Fragment:
        m, n = q.min_count, q.max_count

        if m == 0:
            frag = self._empty()
        else:
            frag = self._build_node(q.expr)
            for _ in range(m - 1):
                nxt = self._build_node(q.expr)
                self._epsilon(frag.accept, nxt.start)
                frag = Fragment(frag.start, nxt.accept)

        if n is None:
            star = self._build_star(q.expr, q.lazy)
            self._epsilon(frag.accept, star.start)
            return Fragment(frag.start, star.accept)

        cur_accept = frag.accept
        for _ in range(n - m):
            new_accept = self._new_state()
            copy = self._build_node(q.expr)
            self._epsilon(cur_accept, copy.start)
            self._epsilon(cur_accept, new_accept, first=q.lazy)
            self._epsilon(copy.accept, new_accept)
            cur_accept = new_accept

        return Fragment(frag.start, cur_accept)


def _describe_class(cc: CharClass) -> str:
    parts: List[str] = []
    for it in cc.items:
        if isinstance(it, CharItem):
            parts.append(it.ch)
        elif isinstance(it, RangeItem):
            parts.append(f"{it.start}-{it.end}")
        else:
            parts.append(f"\\{it.code}")
    prefix = "^" if cc.negated else ""
    return f"[{prefix}{''.join(parts)}]"


def compile_pattern(pattern: str, max_steps: Optional[int] = None) -> NFAEngine:
    parsed = parse_pattern(pattern)
    engine = GraphBuilder(NFAEngine(max_steps=max_steps)).build(parsed)
    logger.debug("compiled %r into %d states", pattern, engine.state_count())
    return engine
