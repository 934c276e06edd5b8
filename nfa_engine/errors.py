from __future__ import annotations
from typing import Optional


class EngineError(Exception):
    pass


class EngineConfigurationError(EngineError):
    """
    Raised while a graph is being built: the graph would be inconsistent.
    These point at a bug in whatever built the graph (usually the compiler),
    so nothing in the package catches them.
    """


class StateNotFoundError(EngineConfigurationError, KeyError):
    def __init__(self, name: str, role: str = "state") -> None:
        super().__init__(f"{role} {name!r} not found")
        self.name = name
        self.role = role

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class SearchBudgetExceeded(EngineError):
    def __init__(self, steps: int) -> None:
        super().__init__(f"Search gave up after {steps} steps")
        self.steps = steps


class PatternSyntaxError(ValueError):
    def __init__(self, message: str, position: Optional[int] = None) -> None:
        if position is not None:
            message = f"{message} (pos {position})"
        super().__init__(message)
        self.position = position


class ParseError(Exception):
    NO_MATCH = "no match"
    INVALID_NUMBER = "invalid number"

    def __init__(self, remaining: str, kind: str = NO_MATCH) -> None:
        super().__init__(f"{kind.capitalize()} at {remaining[:20]!r}")
        self.remaining = remaining
        self.kind = kind
