from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .board import MAX_BOX_SIZE

DEFAULT_BOX_SIZE = 3
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    box_size: int = DEFAULT_BOX_SIZE
    max_activations: Optional[int] = None   # None = search to completion
    log_level: str = DEFAULT_LOG_LEVEL


def _positive_int(name: str, raw: str) -> int:
    try:
        v = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, received {raw!r}.") from None
    if v < 1:
        raise ValueError(f"{name} must be positive, received {v}.")
    return v


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read SUDOKU_BOX_SIZE, SUDOKU_MAX_ACTIVATIONS and SUDOKU_LOG_LEVEL."""
    env = os.environ if environ is None else environ

    box_size = _positive_int("SUDOKU_BOX_SIZE", env.get("SUDOKU_BOX_SIZE", str(DEFAULT_BOX_SIZE)))
    if box_size > MAX_BOX_SIZE:
        raise ValueError(f"SUDOKU_BOX_SIZE must be at most {MAX_BOX_SIZE}, received {box_size}.")

    raw_max = env.get("SUDOKU_MAX_ACTIVATIONS", "").strip()
    max_activations = _positive_int("SUDOKU_MAX_ACTIVATIONS", raw_max) if raw_max else None

    log_level = env.get("SUDOKU_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"SUDOKU_LOG_LEVEL is not a logging level: {log_level!r}.")

    return Settings(box_size=box_size, max_activations=max_activations, log_level=log_level)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
