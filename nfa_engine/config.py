"""
TOML configuration for the command line front-end.

Example file:

    [engine]
    max_steps = 100000      # omit for an unbounded search

    [logging]
    level = "DEBUG"
    format = "%(levelname)s %(name)s: %(message)s"

Every key is optional; a missing file path means defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import toml

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass(frozen=True)
class EngineSettings:
    max_steps: Optional[int] = None


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "WARNING"
    format: str = DEFAULT_LOG_FORMAT

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level.upper())


@dataclass(frozen=True)
class AppConfig:
    engine: EngineSettings = field(default_factory=EngineSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AppConfig:
        eng = data.get("engine", {})
        log = data.get("logging", {})

        max_steps = eng.get("max_steps")
        if max_steps is not None:
            max_steps = int(max_steps)
            if max_steps <= 0:
                raise ValueError("engine.max_steps must be > 0")

        level = str(log.get("level", LoggingSettings.level)).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {level!r}")

        return cls(
            engine=EngineSettings(max_steps=max_steps),
            logging=LoggingSettings(
                level=level,
                format=str(log.get("format", DEFAULT_LOG_FORMAT)),
            ),
        )


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    if path is None:
        return AppConfig()
    return AppConfig.from_mapping(toml.load(path))
