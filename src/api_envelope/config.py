"""
Centralized configuration for the response pipeline.

- Pure dataclass settings, loaded from OS env.
- Parses a .env file at the repository root with python-dotenv.
- Choice validation in __post_init__.
- Immutable singleton via functools.lru_cache.
"""

from __future__ import annotations

import functools
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, cast

from dotenv import load_dotenv

from api_envelope.i18n.translator import DEFAULT_LOCALES_PATH

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _get_env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    return v.strip()


def _get_env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _validate_choice(value: str, *, choices: tuple[str, ...], key: str) -> str:
    if value not in choices:
        raise ValueError(f"{key} must be one of {choices}, got {value!r}")
    return value


# ------------------------------------------------------------------------------
# Settings dataclass (immutable)
# ------------------------------------------------------------------------------
EnvName = Literal["development", "production", "test"]
Language = Literal["tr", "en"]

ENVIRONMENTS: tuple[str, ...] = ("development", "production", "test")
LANGUAGES: tuple[str, ...] = ("tr", "en")


@dataclass(frozen=True)
class Settings:
    # Environment
    environment: EnvName = "development"
    app_name: str = "api-envelope"

    # Observability
    log_level: str = "INFO"
    # None -> JSON in production, console elsewhere
    json_logs: Optional[bool] = None

    # Localization. Success and error paths fall back to different languages.
    fallback_language: Language = "tr"
    error_fallback_language: Language = "en"
    i18n_path: Path = field(default=DEFAULT_LOCALES_PATH)

    is_prod: bool = field(init=False)

    def __post_init__(self) -> None:
        _validate_choice(self.environment, choices=ENVIRONMENTS, key="APP_ENV")
        _validate_choice(self.fallback_language, choices=LANGUAGES, key="FALLBACK_LANGUAGE")
        _validate_choice(self.error_fallback_language, choices=LANGUAGES, key="ERROR_FALLBACK_LANGUAGE")

        if not re.fullmatch(r"(?i)DEBUG|INFO|WARNING|ERROR|CRITICAL", self.log_level.strip()):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

        object.__setattr__(self, "i18n_path", Path(self.i18n_path))
        object.__setattr__(self, "is_prod", self.environment == "production")
        if self.json_logs is None:
            object.__setattr__(self, "json_logs", self.is_prod)

    def safe_dict(self) -> dict:
        return {
            "environment": self.environment,
            "app_name": self.app_name,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
            "fallback_language": self.fallback_language,
            "error_fallback_language": self.error_fallback_language,
            "i18n_path": str(self.i18n_path),
        }


# ------------------------------------------------------------------------------
# Loader (singleton)
# ------------------------------------------------------------------------------
_logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    json_logs = os.getenv("LOG_JSON")
    return Settings(
        environment=cast(EnvName, _get_env_str("APP_ENV", "development")),
        app_name=_get_env_str("APP_NAME", "api-envelope") or "api-envelope",
        log_level=_get_env_str("LOG_LEVEL", "INFO") or "INFO",
        json_logs=_get_env_bool("LOG_JSON") if json_logs is not None and json_logs.strip() else None,
        fallback_language=cast(Language, _get_env_str("FALLBACK_LANGUAGE", "tr")),
        error_fallback_language=cast(Language, _get_env_str("ERROR_FALLBACK_LANGUAGE", "en")),
        i18n_path=Path(_get_env_str("I18N_PATH", str(DEFAULT_LOCALES_PATH)) or DEFAULT_LOCALES_PATH),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Attempt to load .env from repo root (../../.env relative to this package)
    env_file = Path(__file__).resolve().parent.parent.parent / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=str(env_file), override=False)

    settings = load_settings()
    _logger.info("Settings loaded", extra={"settings": settings.safe_dict()})
    return settings
