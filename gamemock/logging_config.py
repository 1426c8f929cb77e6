"""structlog setup: JSON lines in deployments, console rendering for local runs."""

from __future__ import annotations

import logging
import sys

import structlog

from gamemock.config.loader import GameMockSettings

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _service_fields(app_id: str) -> structlog.types.Processor:
    """Stamp every event with the simulated app id.

    `env` is not stamped: it lives in the editable config record and
    events that depend on it log the current value themselves.
    """

    def processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("app_id", app_id)
        return event_dict

    return processor


def _rename_logger_to_module(
    logger: logging.Logger, method_name: str, event_dict: dict
) -> dict:
    if "logger" in event_dict:
        event_dict["module"] = event_dict.pop("logger")
    return event_dict


def setup_logging(
    log_level: str = "info",
    json_format: bool = True,
    *,
    app_id: str = "",
) -> None:
    """Route structlog and stdlib logging through one stdout handler."""
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _rename_logger_to_module,
        _service_fields(app_id),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_format:
        final: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_settings(settings: GameMockSettings) -> None:
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
        app_id=settings.app_id,
    )
