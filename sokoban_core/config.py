from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_ROWS = 10
DEFAULT_COLS = 10
DEFAULT_MAX_BOXES = 100
DEFAULT_HISTORY = 1000
DEFAULT_LOG_LEVEL = "WARNING"

# Largest board side accepted from configuration.
MAX_DIMENSION = 24


@dataclass(frozen=True)
class Settings:
    """Runtime settings, normally read from SOKOBAN_* environment variables."""
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    max_boxes: int = DEFAULT_MAX_BOXES
    history_capacity: int = DEFAULT_HISTORY
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if not 1 <= value <= MAX_DIMENSION:
                raise ValueError(f"{name} must be between 1 and {MAX_DIMENSION}, got {value}")
        if self.max_boxes < 1:
            raise ValueError(f"max_boxes must be positive, got {self.max_boxes}")
        if self.history_capacity < 1:
            raise ValueError(f"history_capacity must be positive, got {self.history_capacity}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level {self.log_level!r}")

    def with_overrides(self, **overrides: Optional[object]) -> 'Settings':
        """Returns a copy with every non-None override applied."""
        values = {
            "rows": self.rows,
            "cols": self.cols,
            "max_boxes": self.max_boxes,
            "history_capacity": self.history_capacity,
            "log_level": self.log_level,
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return Settings(**values)  # type: ignore[arg-type]


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Builds Settings from the environment (os.environ by default)."""
    src = os.environ if env is None else env
    return Settings(
        rows=_env_int(src, "SOKOBAN_ROWS", DEFAULT_ROWS),
        cols=_env_int(src, "SOKOBAN_COLS", DEFAULT_COLS),
        max_boxes=_env_int(src, "SOKOBAN_MAX_BOXES", DEFAULT_MAX_BOXES),
        history_capacity=_env_int(src, "SOKOBAN_HISTORY", DEFAULT_HISTORY),
        log_level=(src.get("SOKOBAN_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
