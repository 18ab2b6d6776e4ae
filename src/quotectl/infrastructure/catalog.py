"""Catalog and scenario file loading (JSON or TOML).

A catalog file holds ``categories`` and ``items``; items name their
category by id. A scenario file holds ``selected`` rows, an optional
``global_discount``, and a ``config`` map for config-driven quantities.

Every read or parse failure surfaces as :class:`InvalidInputError`.
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pydantic

from quotectl.domain.category import Category
from quotectl.domain.errors import DomainError
from quotectl.domain.items import PricingItem
from quotectl.domain.money import DEFAULT_CURRENCY
from quotectl.infrastructure.repositories.memory import (
    InMemoryCategoryRepository,
    InMemoryPricingRepository,
)
from quotectl.services.contracts import CatalogFile, ScenarioFile
from quotectl.services.errors import InvalidInputError
from quotectl.services.mappers import category_from_record, item_from_record

logger = logging.getLogger(__name__)

_SUFFIXES = (".json", ".toml")


def read_document(path: Path) -> dict[str, Any]:
    """Parse *path* as JSON or TOML, chosen by suffix."""
    suffix = path.suffix.lower()
    if suffix not in _SUFFIXES:
        raise InvalidInputError(str(path), f"unsupported file type {suffix or '(none)'}")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidInputError(str(path), exc.strerror or str(exc)) from exc
    try:
        data = json.loads(raw) if suffix == ".json" else tomllib.loads(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise InvalidInputError(str(path), str(exc)) from exc
    if not isinstance(data, dict):
        raise InvalidInputError(str(path), "top level must be an object")
    return data


def _describe(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


@dataclass(frozen=True)
class Catalog:
    """Categories and items loaded from one catalog file."""

    categories: tuple[Category, ...]
    items: tuple[PricingItem, ...]

    def item_map(self) -> dict[str, PricingItem]:
        return {item.id: item for item in self.items}

    def pricing_repository(self) -> InMemoryPricingRepository:
        return InMemoryPricingRepository(self.items)

    def category_repository(self) -> InMemoryCategoryRepository:
        return InMemoryCategoryRepository(self.categories)


def load_catalog(path: Path, default_currency: str = DEFAULT_CURRENCY) -> Catalog:
    """Read and validate the catalog at *path*.

    Items without an explicit currency are priced in *default_currency*.
    """
    source = str(path)
    try:
        document = CatalogFile.model_validate(read_document(path))
    except pydantic.ValidationError as exc:
        raise InvalidInputError(source, _describe(exc)) from exc

    try:
        categories = [category_from_record(record) for record in document.categories]
        by_id: dict[str, Category] = {}
        for category in categories:
            if category.id in by_id:
                raise InvalidInputError(source, f"duplicate category id {category.id}")
            by_id[category.id] = category

        items: dict[str, PricingItem] = {}
        for record in document.items:
            if record.id in items:
                raise InvalidInputError(source, f"duplicate item id {record.id}")
            items[record.id] = item_from_record(record, by_id, default_currency)
    except DomainError as exc:
        raise InvalidInputError(source, str(exc)) from exc

    logger.debug("loaded catalog %s: %d categories, %d items", path, len(by_id), len(items))
    return Catalog(categories=tuple(categories), items=tuple(items.values()))


def load_scenario(path: Path) -> ScenarioFile:
    """Read and validate the scenario at *path*."""
    try:
        return ScenarioFile.model_validate(read_document(path))
    except pydantic.ValidationError as exc:
        raise InvalidInputError(str(path), _describe(exc)) from exc
