"""Application error taxonomy.

Every error carries a stable ``code`` that the service adapter copies into
``ServiceError.code``. ValidationError and NotFoundError pass through use
cases untouched; anything else is wrapped in ApplicationError with the
original exception chained.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ApplicationError(Exception):
    """Base class for all application-layer failures."""

    code = "APPLICATION_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> dict[str, Any]:
        return {}


class ValidationError(ApplicationError):
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Validation failed for {field}: {message}")
        self.field = field
        self.reason = message

    @property
    def detail(self) -> dict[str, Any]:
        return {"field": self.field}


class NotFoundError(ApplicationError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, ids: str | Sequence[str]) -> None:
        self.entity = entity
        self.ids = [ids] if isinstance(ids, str) else list(ids)
        super().__init__(f"{entity} with id {', '.join(self.ids)} not found")

    @property
    def detail(self) -> dict[str, Any]:
        return {"entity": self.entity, "ids": self.ids}


class BusinessRuleError(ApplicationError):
    code = "BUSINESS_RULE"

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(f"Business rule violation: {rule} - {message}")
        self.rule = rule

    @property
    def detail(self) -> dict[str, Any]:
        return {"rule": self.rule}


class InfrastructureError(ApplicationError):
    code = "INFRASTRUCTURE_ERROR"

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"Infrastructure error in {service}: {message}")
        self.service = service

    @property
    def detail(self) -> dict[str, Any]:
        return {"service": self.service}


class InvalidInputError(ApplicationError):
    """An input file (catalog, scenario) is unreadable or malformed."""

    code = "INVALID_INPUT"

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"Invalid input in {source}: {message}")
        self.source = source

    @property
    def detail(self) -> dict[str, Any]:
        return {"source": self.source}
