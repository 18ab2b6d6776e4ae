"""Locating ``quotectl.toml`` and the catalog a project prices from.

The config file is found by walking up from the CWD, the way git finds
``.git/``; ``QUOTECTL_CONFIG`` pins it explicitly. A project with no
``[catalog] path`` still works when a ``catalog.json`` or ``catalog.toml``
sits in its base directory.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

from quotectl.config.models import QuoteConfig

CONFIG_FILENAME = "quotectl.toml"
CONFIG_ENV_VAR = "QUOTECTL_CONFIG"
DEFAULT_CATALOG_NAMES = ("catalog.json", "catalog.toml")


def _ancestors(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``quotectl.toml`` at or above *start* (default: CWD).

    A set ``QUOTECTL_CONFIG`` short-circuits the search, yielding None
    when it names a missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_default_catalog(directory: Path) -> Path | None:
    """First of :data:`DEFAULT_CATALOG_NAMES` present in *directory*."""
    for name in DEFAULT_CATALOG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


class ConfigFileError(click.ClickException):
    """``quotectl.toml`` exists but cannot be used."""


def read_config_file(path: Path) -> dict[str, Any]:
    """Parsed TOML from *path*.

    Raises:
        ConfigFileError: The file is not valid TOML, or has a top-level key
            that is not a :class:`QuoteConfig` section.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(f"Invalid TOML in {path}: {exc}") from exc

    sections = QuoteConfig.model_fields
    unknown = sorted(key for key in data if key not in sections)
    if unknown:
        raise ConfigFileError(
            f"Unknown section [{unknown[0]}] in {path} (expected one of: {', '.join(sections)})"
        )
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> QuoteConfig:
    """Validated config from *path*, or from the file discovered from *cwd*.

    No file at all means defaults.

    Raises:
        ConfigFileError: See :func:`read_config_file`.
        pydantic.ValidationError: A section has out-of-range values.
    """
    path = path or find_config(cwd)
    if path is None:
        return QuoteConfig()
    return QuoteConfig.model_validate(read_config_file(path))
