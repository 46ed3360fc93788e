"""Runtime settings read from the environment (and a `.env` file, via python-dotenv).

Only entry points call `Settings.from_env()`; the engine and renderers take
plain arguments.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

_PREFIX = "COMPOSEVERSE_"


class ConfigError(ValueError):
    """Invalid value in an environment setting."""


def _read(name: str, default: str) -> str:
    return os.environ.get(_PREFIX + name, default)


def _positive(name: str, default: str, cast: type[int] | type[float]) -> int | float:
    raw = _read(name, default)
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigError(f"{_PREFIX}{name}={raw!r} is not a number") from e
    if value <= 0:
        raise ConfigError(f"{_PREFIX}{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    width: int = 1200
    height: int = 800
    fps: int = 20
    duration_s: float = 20.0  # One full launch loop
    activation_delay_ms: float = 500.0
    haptic_ms: int = 50
    output_dir: Path = Path("results")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from COMPOSEVERSE_* variables.

        Raises:
            ConfigError: When a variable is not a positive number or the log
                level is unknown.
        """
        log_level = _read("LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"{_PREFIX}LOG_LEVEL={log_level!r} is not a logging level")
        return cls(
            width=int(_positive("WIDTH", "1200", int)),
            height=int(_positive("HEIGHT", "800", int)),
            fps=int(_positive("FPS", "20", int)),
            duration_s=float(_positive("DURATION_S", "20", float)),
            activation_delay_ms=float(_positive("ACTIVATION_DELAY_MS", "500", float)),
            haptic_ms=int(_positive("HAPTIC_MS", "50", int)),
            output_dir=Path(_read("OUTPUT_DIR", "results")),
            log_level=log_level,
        )

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=self.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
