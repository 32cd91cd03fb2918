"""structlog setup for the trade agent.

Request fields (coin, side, workspace) are bound through structlog.contextvars
so concurrent trades on the one event loop keep separate log context. Any
event field named in SENSITIVE_FIELDS is masked before rendering.
"""

import logging

import structlog

SENSITIVE_FIELDS = frozenset({"private_key", "api_key", "openserv_api_key", "x-openserv-key"})

# Chatty transport loggers from ccxt and the signing SDK's requests session.
_QUIET_LOGGERS = ("ccxt", "urllib3", "aiohttp.access")


def mask_secret(value: str, head: int = 10, tail: int = 4) -> str:
    """Mask a secret for log output, keeping only a short prefix and suffix."""
    if len(value) <= head + tail:
        return "***"
    suffix = value[-tail:] if tail > 0 else ""
    return f"{value[:head]}...{suffix}"


def redact_secrets(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Processor masking sensitive fields left unmasked by the caller."""
    for key in SENSITIVE_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and "..." not in value:
            event_dict[key] = mask_secret(value)
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        log_level: Root level name; unknown names fall back to INFO.
        log_format: "json" for machine-readable output, anything else renders
            for the console.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format.lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
