"""
Structured logging for pricing runs.

Engine modules log through plain ``logging.getLogger(__name__)``. Once
``setup_logging`` has run, those records go through structlog's
ProcessorFormatter on the root handler and are rendered as console lines in
development or JSON lines elsewhere. ``batch_log_context`` tags every record
emitted during a proposal batch with its batch and channel ids.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from repricer.config import AppEnv, Settings


def setup_logging(
    app_env: AppEnv,
    log_level: str = "INFO",
    log_format: str = "auto",
    app_name: str = "repricer",
) -> None:
    """
    Route stdlib logging through structlog.

    Args:
        app_env: Current environment (development, staging, production).
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR).
        log_format: ``"json"``, ``"console"``, or ``"auto"``
                    (auto = console in dev, json otherwise).
        app_name: Value of the ``service`` key on every record.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _service_name(app_name),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if _should_use_json(app_env, log_format):
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def configure_logging(settings: Settings) -> None:
    """Apply the logging settings of a repricer deployment."""
    setup_logging(
        app_env=settings.app_env,
        log_level=settings.log_level,
        log_format=settings.log_format,
        app_name=settings.app_name,
    )


@contextmanager
def batch_log_context(batch_id: str, channel_id: str) -> Iterator[None]:
    """Bind ``batch_id`` and ``channel_id`` to every record logged inside the block."""
    with structlog.contextvars.bound_contextvars(batch_id=batch_id, channel_id=channel_id):
        yield


def _service_name(app_name: str) -> structlog.types.Processor:
    def add_service(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        return event_dict

    return add_service


def _should_use_json(app_env: AppEnv, log_format: str) -> bool:
    if log_format == "json":
        return True
    if log_format == "console":
        return False
    # auto: JSON outside development
    return app_env != AppEnv.DEVELOPMENT
