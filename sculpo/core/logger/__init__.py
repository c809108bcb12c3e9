"""
Project logger: console plus optional rotating JSON-lines file.

Usage:
    from sculpo.core.logger import configure, LoggerConfig

    configure()                                   # LoggerConfig.from_env()
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/sculpo"))

Modules keep using ``logging.getLogger(__name__)``; everything under the
``sculpo`` namespace inherits the handlers attached here.
"""
from sculpo.core.logger.config import LoggerConfig
from sculpo.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from sculpo.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
