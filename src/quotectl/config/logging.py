"""structlog configuration for quotectl.

Everything logs to stderr so stdout stays clean for quote output:

- Human (default): colored console lines
- JSON (``--log-json``): one JSON object per event

structlog events and plain stdlib records (the domain layer logs through
``logging``) share one handler and one processor chain.
"""

from __future__ import annotations

import logging
import sys
from decimal import Decimal
from typing import Any

import structlog

from quotectl.domain.money import Money

_QUIET_LIBRARIES = ("asyncio",)


def _render_amounts(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Decimal and Money values as exact strings."""
    for key, value in event_dict.items():
        if isinstance(value, Money):
            event_dict[key] = f"{value.amount} {value.currency}"
        elif isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def _handler(renderer: structlog.types.Processor, pre_chain: list[Any]) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to a single stderr handler.

    Calling it again replaces the handler instead of adding a second one.

    Args:
        verbose: ``quotectl.*`` loggers at DEBUG; otherwise WARNING and up.
        log_json: JSON lines instead of the console renderer.
    """
    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _render_amounts,
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_handler(renderer, pre_chain))
    root.setLevel(logging.WARNING)

    logging.getLogger("quotectl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
