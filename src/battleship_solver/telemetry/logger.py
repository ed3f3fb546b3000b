"""Logging setup with optional OpenTelemetry log export."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import TelemetryConfig

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s "
    "| trace_id=%(otelTraceID)s span_id=%(otelSpanID)s"
)

_LOGGER: logging.Logger | None = None
_CONSOLE_CONFIGURED = False
_OTLP_HANDLER: logging.Handler | None = None


class _OtelContextFilter(logging.Filter):
    """Ensures trace/span placeholders exist even when no context is active."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not hasattr(record, "otelTraceID"):
            record.otelTraceID = "-"
        if not hasattr(record, "otelSpanID"):
            record.otelSpanID = "-"
        return True


def get_logger(name: str = "battleship_solver") -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(name)
    return _LOGGER


def init_logging(config: TelemetryConfig) -> logging.Logger:
    """Configure console logging and, when enabled, an OTLP log handler."""
    _configure_console(config.log_level)
    logger = get_logger()
    if not config.enable_logging:
        return logger

    try:
        from opentelemetry._logs import set_logger_provider
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
        from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
        from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
        from opentelemetry.sdk.resources import Resource
    except ImportError:  # pragma: no cover
        logger.warning("otlp_logging_unavailable")
        return logger

    provider = LoggerProvider(resource=Resource.create(config.resource_dict()))
    if config.otlp_logs_endpoint:
        exporter = OTLPLogExporter(endpoint=config.otlp_logs_endpoint, insecure=True)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    set_logger_provider(provider)

    _install_otlp_handler(LoggingHandler(level=logging.INFO, logger_provider=provider))
    return logger


def _configure_console(level: str) -> None:
    global _CONSOLE_CONFIGURED
    root_logger = logging.getLogger()
    if not _CONSOLE_CONFIGURED:
        if not root_logger.handlers:
            logging.basicConfig(format=LOG_FORMAT)
            for existing in root_logger.handlers:
                existing.addFilter(_OtelContextFilter())
        root_logger.addFilter(_OtelContextFilter())
        _CONSOLE_CONFIGURED = True
    logging.getLogger("battleship_solver").setLevel(level.upper())


def _install_otlp_handler(handler: logging.Handler) -> None:
    """Attach the OTLP logging handler to the root logger once."""
    global _OTLP_HANDLER
    if _OTLP_HANDLER is not None:
        return
    handler.addFilter(_OtelContextFilter())
    logging.getLogger().addHandler(handler)
    _OTLP_HANDLER = handler
