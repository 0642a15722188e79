"""Process-wide configuration: target schema, synonyms, and thresholds.

Settings are read once from the environment (optionally via a ``.env``
file) and are immutable afterwards. Variables:

- DATASIFT_MATCH_THRESHOLD: approximate header match threshold (default 80)
- DATASIFT_MIN_CONTACT_DIGITS: minimum digits for a contact number (default 6)
- DATASIFT_SYNONYMS_FILE: optional JSON file replacing the synonym dictionary
- DATASIFT_MAX_UPLOAD_BYTES: HTTP upload size limit (default 20 MiB)
- DATASIFT_HOST / PORT: HTTP bind address (default 0.0.0.0:3000)
- DATASIFT_LOG_LEVEL: log level (default INFO)
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class TargetField(str, Enum):
    """Canonical output columns, in export order."""

    DATE = "DATE"
    FULL_NAME = "FULL NAME"
    CONTACT = "CONTACT"
    ADDRESS = "ADDRESS"


class ConfigurationError(Exception):
    """Raised when settings or the synonym dictionary are malformed."""


DEFAULT_SYNONYMS: dict[TargetField, tuple[str, ...]] = {
    TargetField.DATE: ("date", "dob", "time", "created_at", "joined", "day"),
    TargetField.FULL_NAME: (
        "name", "fullname", "client", "customer", "first name", "last name", "user",
    ),
    TargetField.CONTACT: ("phone", "mobile", "cell", "tel", "contact number", "number"),
    TargetField.ADDRESS: ("address", "location", "residence", "city", "street"),
}

DEFAULT_MATCH_THRESHOLD = 80.0
DEFAULT_MIN_CONTACT_DIGITS = 6
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def build_synonyms(raw: Mapping[Any, Any]) -> dict[TargetField, tuple[str, ...]]:
    """Validate a synonym mapping and return it keyed by TargetField.

    Keys may be TargetField members or their string values ("FULL NAME") or
    names ("FULL_NAME"). Synonyms are lowercased and trimmed.

    Raises:
        ConfigurationError: On unknown or missing fields, or bad synonyms
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Synonym dictionary must be a mapping")

    synonyms: dict[TargetField, tuple[str, ...]] = {}

    for key, values in raw.items():
        target = _coerce_target(key)
        if isinstance(values, str) or not isinstance(values, (list, tuple, set, frozenset)):
            raise ConfigurationError(f"Synonyms for {target.value} must be a list of strings")

        cleaned = []
        for value in values:
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"Invalid synonym for {target.value}: {value!r}"
                )
            cleaned.append(value.strip().lower())

        if not cleaned:
            raise ConfigurationError(f"No synonyms configured for {target.value}")
        synonyms[target] = tuple(dict.fromkeys(cleaned))

    missing = [t.value for t in TargetField if t not in synonyms]
    if missing:
        raise ConfigurationError(f"Missing synonyms for fields: {missing}")

    # Re-key in enumeration order
    return {target: synonyms[target] for target in TargetField}


def _coerce_target(key: Any) -> TargetField:
    if isinstance(key, TargetField):
        return key
    if isinstance(key, str):
        text = key.strip().upper()
        for target in TargetField:
            if text in (target.value, target.name):
                return target
    raise ConfigurationError(f"Unknown target field: {key!r}")


def load_synonyms_file(path: str) -> dict[TargetField, tuple[str, ...]]:
    """Load a synonym dictionary from a JSON file."""
    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read synonyms file {path}: {e}") from e

    return build_synonyms(raw)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""

    synonyms: Mapping[TargetField, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_SYNONYMS)
    )
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    min_contact_digits: int = DEFAULT_MIN_CONTACT_DIGITS
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self):
        object.__setattr__(self, "synonyms", build_synonyms(self.synonyms))

        if not 0 <= self.match_threshold <= 100:
            raise ConfigurationError(
                f"match_threshold must be between 0 and 100, got {self.match_threshold}"
            )
        if self.min_contact_digits < 1:
            raise ConfigurationError("min_contact_digits must be positive")
        if self.max_upload_bytes < 1:
            raise ConfigurationError("max_upload_bytes must be positive")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env_file: Optional path to a .env file (default: search cwd)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If any value is malformed
    """
    load_dotenv(env_file)

    synonyms_path = os.getenv("DATASIFT_SYNONYMS_FILE")
    synonyms = load_synonyms_file(synonyms_path) if synonyms_path else DEFAULT_SYNONYMS

    settings = Settings(
        synonyms=synonyms,
        match_threshold=_env_number("DATASIFT_MATCH_THRESHOLD", DEFAULT_MATCH_THRESHOLD, float),
        min_contact_digits=_env_number(
            "DATASIFT_MIN_CONTACT_DIGITS", DEFAULT_MIN_CONTACT_DIGITS, int
        ),
        max_upload_bytes=_env_number(
            "DATASIFT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES, int
        ),
        host=os.getenv("DATASIFT_HOST", "0.0.0.0"),
        port=_env_number("PORT", 3000, int),
        log_level=os.getenv("DATASIFT_LOG_LEVEL", "INFO").upper(),
    )

    logger.debug(
        "Loaded settings",
        extra={
            "match_threshold": settings.match_threshold,
            "min_contact_digits": settings.min_contact_digits,
            "synonyms_file": synonyms_path,
        }
    )

    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()
