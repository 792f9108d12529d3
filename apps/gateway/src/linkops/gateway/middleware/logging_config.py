"""structlog configuration

dev mode: pretty console output
json mode: one JSON object per line, exceptions rendered into the event
Logfire APM: enabled by LOGFIRE_SEND_TO_LOGFIRE, otherwise local logs only.
"""

import logging
import os

import structlog

# Libraries that log every probe or statement at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_processors(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(),
    ]


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """Configure structlog and route it through stdlib logging

    Args:
        log_format: "json" or "dev"; defaults to LINKOPS_LOG_FORMAT, then "dev"
        log_level: level name; defaults to LINKOPS_LOG_LEVEL, then "INFO"
    """
    log_format = log_format or os.environ.get("LINKOPS_LOG_FORMAT", "dev")
    log_level = (log_level or os.environ.get("LINKOPS_LOG_LEVEL", "INFO")).upper()
    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=_final_processors(log_format),
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Probe traffic is summarised by linkcheck's own events
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire(app) -> None:
    """Optional Logfire initialisation

    LOGFIRE_SEND_TO_LOGFIRE:
    - "true": enable Logfire APM (needs LOGFIRE_TOKEN) and instrument the app
      plus outgoing httpx probes
    - "false" (default): local logs only
    """
    send_to_logfire = os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower()
    if send_to_logfire != "true":
        return

    try:
        import logfire

        logfire.configure(service_name="linkops-gateway")
        logfire.instrument_fastapi(app)
        logfire.instrument_httpx()
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
            message="Logfire initialisation failed, using local logs only",
        )
