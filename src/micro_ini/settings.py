# SPDX-License-Identifier: AGPL-3.0-or-later
"""Central configuration loader with YAML + environment support."""

from __future__ import annotations

import codecs
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .status import MAX_LINE_LENGTH, MIN_LINE_LENGTH, ParserFlags

_ENV_PREFIX = "MICRO_INI_"


class ParserSettings(BaseModel):
    """Defaults applied when the CLI or a caller does not pass explicit flags."""

    max_line_length: int = MAX_LINE_LENGTH
    encoding: str = "utf-8"
    skip_bom: bool = False
    multiline: bool = False
    stop_on_first_error: bool = False

    @field_validator("max_line_length")
    @classmethod
    def _min_length(cls, value: int) -> int:  # noqa: D401
        if value < MIN_LINE_LENGTH:
            raise ValueError(f"max_line_length must be >= {MIN_LINE_LENGTH}")
        return int(value)

    @field_validator("encoding")
    @classmethod
    def _strip_encoding(cls, value: str) -> str:  # noqa: D401
        normalized = value.strip() or "utf-8"
        try:
            codecs.lookup(normalized)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {normalized}") from exc
        return normalized

    @property
    def flags(self) -> ParserFlags:
        flags = ParserFlags.NONE
        if self.skip_bom:
            flags |= ParserFlags.BOM
        if self.multiline:
            flags |= ParserFlags.MULTILINE
        if self.stop_on_first_error:
            flags |= ParserFlags.STOP_ON_FIRST_ERROR
        return flags


class OutputSettings(BaseModel):
    """How the command line tool renders parsed entries."""

    format: str = "jsonl"

    @field_validator("format")
    @classmethod
    def _known_format(cls, value: str) -> str:  # noqa: D401
        normalized = value.strip().lower() or "jsonl"
        if normalized not in {"jsonl", "text"}:
            raise ValueError("format must be 'jsonl' or 'text'")
        return normalized


class MicroIniSettings(BaseModel):
    """Composite settings object loaded from YAML + environment variables."""

    parser: ParserSettings = Field(default_factory=ParserSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


def _default_settings_path() -> Path:
    base_dir = Path(__file__).resolve().parents[2]
    return base_dir / "configs" / "settings.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings YAML at {path} must contain a dictionary")
    return data


def _resolve_settings_path(explicit: Optional[str | Path]) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.getenv("MICRO_INI_SETTINGS_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return _default_settings_path()


def _resolve_env_path() -> Optional[Path]:
    candidate = os.getenv("MICRO_INI_DOTENV")
    if candidate:
        return Path(candidate).expanduser()
    base_dir = Path(__file__).resolve().parents[2]
    default = base_dir / ".env"
    return default if default.exists() else None


def _collect_env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        parts = key[len(_ENV_PREFIX) :].split("__")
        if len(parts) < 2:
            # MICRO_INI_SETTINGS_PATH / MICRO_INI_DOTENV locate files, they are
            # not settings themselves.
            continue
        cursor = overrides
        for idx, part in enumerate(parts):
            normalized = part.lower()
            if idx == len(parts) - 1:
                cursor[normalized] = value
            else:
                cursor = cursor.setdefault(normalized, {})  # type: ignore[assignment]
    return overrides


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> MicroIniSettings:
    """Load the global settings, caching the resulting object."""

    env_path = _resolve_env_path()
    if env_path is not None:
        load_dotenv(dotenv_path=env_path, override=False)
    data = _read_yaml(_resolve_settings_path(path))
    merged = _deep_merge(data, _collect_env_overrides())
    return MicroIniSettings.model_validate(merged)


def reset_settings_cache() -> None:
    """Clear the cached settings instance (useful for tests)."""

    get_settings.cache_clear()  # type: ignore[attr-defined]


__all__ = [
    "MicroIniSettings",
    "OutputSettings",
    "ParserSettings",
    "get_settings",
    "reset_settings_cache",
]
