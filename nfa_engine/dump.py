# dump.py
#
# Readable transition table for an engine graph.
#
# Columns:
#   State | Markers | Prio | Dest | Matcher
#
# One row per transition, in priority order. Repeated State/Markers cells are
# blanked on follow-up rows of the same state. States with no outgoing
# transitions still get a row.

from __future__ import annotations
from typing import List

from .engine import NFAEngine
from .models import Matcher


def _is_printable_ascii(code: int) -> bool:
    return 32 <= code <= 126


def escape_text(text: str) -> str:
    out: List[str] = []
    for ch in text:
        if ch == "\n":
            out.append(r"\n")
        elif ch == "\r":
            out.append(r"\r")
        elif ch == "\t":
            out.append(r"\t")
        elif _is_printable_ascii(ord(ch)) or ch.isprintable():
            out.append(ch)
        else:
            out.append(f"\\x{ord(ch):02X}")
    return "".join(out)


def _matcher_cell(matcher: Matcher) -> str:
    if matcher.is_epsilon:
        return "ε"
    return escape_text(matcher.label)


def make_table(rows: List[List[str]], headers: List[str]) -> str:
    cols = len(headers)
    widths = [len(h) for h in headers]
    for r in rows:
        for c in range(cols):
            widths[c] = max(widths[c], len(r[c]))

    def fmt_row(r: List[str]) -> str:
        return " | ".join(r[c].ljust(widths[c]) for c in range(cols)).rstrip()

    line = "-+-".join("-" * w for w in widths)
    out = [fmt_row(headers), line]
    out.extend(fmt_row(r) for r in rows)
    return "\n".join(out)


def dump_engine_table(engine: NFAEngine) -> str:
    rows: List[List[str]] = []
    for state in engine.states:
        markers = []
        if state.name == engine.initial_state:
            markers.append("START")
        if engine.is_accepting(state.name):
            markers.append("ACCEPT")
        mark = ",".join(markers)

        if not state.transitions:
            rows.append([state.name, mark, "", "", ""])
            continue

        for prio, t in enumerate(state.transitions):
            first_row = prio == 0
            rows.append([
                state.name if first_row else "",
                mark if first_row else "",
                str(prio),
                t.target,
                _matcher_cell(t.matcher),
            ])

    return make_table(rows, ["State", "Markers", "Prio", "Dest", "Matcher"])
