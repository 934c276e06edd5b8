from .models import (
    CHARACTER,
    EPSILON,
    Matcher,
    State,
    Transition,
    character_matcher,
    epsilon_matcher,
    literal_matcher,
)
from .engine import NFAEngine, SearchFrame
from .errors import (
    EngineConfigurationError,
    EngineError,
    ParseError,
    PatternSyntaxError,
    SearchBudgetExceeded,
    StateNotFoundError,
)
from .compiler import compile_pattern, parse_pattern
from .dump import dump_engine_table

__all__ = [
    "CHARACTER",
    "EPSILON",
    "Matcher",
    "State",
    "Transition",
    "character_matcher",
    "epsilon_matcher",
    "literal_matcher",
    "NFAEngine",
    "SearchFrame",
    "EngineConfigurationError",
    "EngineError",
    "ParseError",
    "PatternSyntaxError",
    "SearchBudgetExceeded",
    "StateNotFoundError",
    "compile_pattern",
    "parse_pattern",
    "dump_engine_table",
]
