from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict

import structlog

# uvicorn installs its own handlers unless run with log_config=None; these are
# re-pointed at the root handler so server records share the JSON stream.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_SHARED_PROCESSORS = [
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.add_log_level,
]


def configure_logging(service_name: str, level: str = "INFO") -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
        server_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    get_logger(service_name).info("logging_configured", level=level.upper())


def log_event(logger: structlog.BoundLogger, event_type: str, payload: Dict[str, Any]) -> None:
    logger.info(event_type, **payload)


@lru_cache(maxsize=None)
def get_logger(service_name: str) -> structlog.BoundLogger:
    return structlog.get_logger(service=service_name)
