"""Logging setup for the command line front-end."""

from __future__ import annotations

import logging

from .config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    logging.basicConfig(
        level=settings.level_number,
        format=settings.format,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
