"""Settings read from the environment (and a ``.env`` file, when present)."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT = Path(__file__).parent.parent.parent

LANGUAGES = ("en", "fr")


class ConfigurationError(ValueError):
    """An environment setting has an unusable value."""


@dataclass(frozen=True)
class Settings:
    resources_dir: Path
    star_catalogue: str
    asterisms: str
    color_table: str
    log_level: str
    lang: str
    results_dir: Path

    @property
    def star_catalogue_path(self) -> Path:
        return self.resources_dir / self.star_catalogue

    @property
    def asterisms_path(self) -> Path:
        return self.resources_dir / self.asterisms

    @property
    def color_table_path(self) -> Path:
        return self.resources_dir / self.color_table


def _log_level(name: str) -> str:
    level = name.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level: {name}")
    return level


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        ConfigurationError: On an unknown language or log level.
    """
    lang = os.environ.get("STARSIGHT_LANG", "en")
    if lang not in LANGUAGES:
        raise ConfigurationError(f"Unsupported language: {lang} (expected one of {LANGUAGES})")
    return Settings(
        resources_dir=Path(os.environ.get("STARSIGHT_RESOURCES_DIR", _ROOT / "resources")),
        star_catalogue=os.environ.get("STARSIGHT_STAR_CATALOGUE", "hygdata_v3.csv"),
        asterisms=os.environ.get("STARSIGHT_ASTERISMS", "asterisms.txt"),
        color_table=os.environ.get("STARSIGHT_COLOR_TABLE", "bbr_color.txt"),
        log_level=_log_level(os.environ.get("STARSIGHT_LOG_LEVEL", "INFO")),
        lang=lang,
        results_dir=Path(os.environ.get("STARSIGHT_RESULTS_DIR", _ROOT / "results")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings, read once after loading ``.env``."""
    load_dotenv()
    return load_settings()
