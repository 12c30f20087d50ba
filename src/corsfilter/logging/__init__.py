"""corsfilter logging — logging port and structlog adapter."""

from corsfilter.logging.port import LoggingPort
from corsfilter.logging.structlog_adapter import LoggingProperties, StructlogAdapter, configure_logging

__all__ = ["LoggingPort", "LoggingProperties", "StructlogAdapter", "configure_logging"]
