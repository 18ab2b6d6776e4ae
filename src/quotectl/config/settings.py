"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``QUOTECTL_*`` prefix, ``__`` for nested sections
  3. TOML file: ``quotectl.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`quotectl.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from quotectl.config.discovery import find_config, find_default_catalog, read_config_file
from quotectl.config.models import BucketsConfig, CatalogConfig, DiscountsConfig, PricingConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """The sections of one ``quotectl.toml``, merged below env vars.

    Malformed files and unknown sections raise :class:`ConfigFileError`
    (a ``click.ClickException``) while the settings are being built.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections = read_config_file(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return self._sections


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class QuoteSettings(BaseSettings):
    """Unified settings for the quotectl CLI.

    Stored on the click context (via :class:`AppContext`) at the CLI root.

    Attributes:
        base_dir: Directory relative catalog paths resolve against (parent
            of ``quotectl.toml``, or CWD if no config was found).
        config_path: The TOML file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "QUOTECTL_",
        "env_nested_delimiter": "__",
    }

    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    buckets: BucketsConfig = Field(default_factory=BucketsConfig)
    discounts: DiscountsConfig = Field(default_factory=DiscountsConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def catalog_path(self) -> Path | None:
        """Catalog file, resolved against :attr:`base_dir`.

        Without a configured path, a ``catalog.json``/``catalog.toml`` in
        :attr:`base_dir` is used.
        """
        if not self.catalog.path:
            return find_default_catalog(self.base_dir)
        path = Path(self.catalog.path).expanduser()
        return path if path.is_absolute() else self.base_dir / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        catalog_path: str | None = None,
        **cli_flags: Any,
    ) -> QuoteSettings:
        """Construct settings from a CLI invocation.

        Discovers ``quotectl.toml`` via walk-up (or explicit *config_path*)
        and merges CLI flags as highest-priority overrides. An explicit
        *catalog_path* replaces the ``[catalog]`` section and is taken
        relative to the CWD.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config()

        overrides: dict[str, Any] = dict(cli_flags)
        if catalog_path:
            overrides["catalog"] = CatalogConfig(path=str(Path(catalog_path).resolve()))

        _tls.toml_path = toml_path
        try:
            return cls(
                base_dir=toml_path.parent if toml_path else Path.cwd(),
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
