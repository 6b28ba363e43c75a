"""
Logging Configuration Module
===========================

Controls logging levels and output formatting for the trade simulator.
Provides different logging modes for development, live monitoring and tests.
"""

import sys
from enum import Enum
from loguru import logger

from .config import config


class LogLevel(Enum):
    """Logging levels for different system modes"""
    SILENT = "SILENT"           # Only critical errors
    QUIET = "QUIET"             # Errors and warnings only
    NORMAL = "NORMAL"           # Info, warnings, and errors
    VERBOSE = "VERBOSE"         # Debug, info, warnings, and errors
    TRACE = "TRACE"             # All logging including trace


LEVEL_MAPPING = {
    LogLevel.SILENT: "CRITICAL",
    LogLevel.QUIET: "WARNING",
    LogLevel.NORMAL: "INFO",
    LogLevel.VERBOSE: "DEBUG",
    LogLevel.TRACE: "TRACE"
}

# Modules that log on every tick
HOT_PATH_MODULES = [
    "tradesim.data_ingestion.order_book",
    "tradesim.data_ingestion.tick_pipeline",
    "tradesim.cost_model.cost_estimator",
    "tradesim.simulation.controller"
]


class LogConfig:
    """Logging configuration manager"""

    def __init__(self):
        self.current_level = LogLevel.NORMAL
        self._initialized = False
        self._console_handler_id = None

    def setup_logging(self,
                     level: LogLevel = LogLevel.NORMAL,
                     show_backtrace: bool = False,
                     show_diagnose: bool = False) -> None:
        """
        Configure console logging for the application

        Args:
            level: Logging level to use
            show_backtrace: Show full backtraces on errors
            show_diagnose: Show diagnostic information
        """
        # Replace only our own console sink so file sinks survive a mode switch
        if self._console_handler_id is not None:
            logger.remove(self._console_handler_id)
        elif not self._initialized:
            logger.remove()

        if level == LogLevel.SILENT:
            format_str = "<red><bold>CRITICAL</bold></red> | {message}"
        elif level == LogLevel.QUIET:
            format_str = "<level>{level}</level> | {message}"
        elif level == LogLevel.NORMAL:
            format_str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | {message}"
        else:
            format_str = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | {message}"

        self._console_handler_id = logger.add(
            sys.stderr,
            format=format_str,
            level=LEVEL_MAPPING[level],
            backtrace=show_backtrace,
            diagnose=show_diagnose,
            colorize=True
        )

        self.current_level = level

        if level != LogLevel.SILENT and not self._initialized:
            logger.info(f"Logging configured: level={level.value}")

        self._initialized = True

    def set_development_mode(self) -> None:
        """Configure logging for development - full output"""
        self.setup_logging(
            level=LogLevel.VERBOSE,
            show_backtrace=True,
            show_diagnose=True
        )

    def set_production_mode(self) -> None:
        """Configure logging for live monitoring - balanced output"""
        self.setup_logging(level=LogLevel.NORMAL)

    def set_quiet_mode(self) -> None:
        """Configure logging for tests and replays - warnings and errors only"""
        self.setup_logging(level=LogLevel.QUIET)

    def add_file_logging(self,
                        filepath: str,
                        level: LogLevel = LogLevel.VERBOSE,
                        rotation: str = "10 MB",
                        retention: str = "7 days") -> int:
        """
        Add file logging in addition to console

        Args:
            filepath: Path to log file
            level: Logging level for file
            rotation: File rotation policy
            retention: Log retention policy

        Returns:
            loguru handler id, usable with logger.remove()
        """
        file_format = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"

        handler_id = logger.add(
            filepath,
            format=file_format,
            level=LEVEL_MAPPING[level],
            rotation=rotation,
            retention=retention,
            backtrace=True,
            diagnose=True
        )

        if self.current_level != LogLevel.SILENT:
            logger.info(f"File logging enabled: {filepath}")

        return handler_id

    def suppress_module_logging(self, modules: list[str]) -> None:
        """
        Suppress logging from specific modules

        Args:
            modules: List of module names to suppress
        """
        for module in modules:
            logger.disable(module)

        if self.current_level != LogLevel.SILENT:
            logger.info(f"Suppressed logging for modules: {modules}")


# Global log configuration instance
log_config = LogConfig()


def setup_development_logging():
    """Quick setup for development - full logging"""
    log_config.set_development_mode()


def setup_production_logging():
    """Quick setup for live monitoring - balanced logging"""
    log_config.set_production_mode()


def setup_quiet_logging():
    """Quick setup for replays - hot path modules muted"""
    log_config.set_quiet_mode()
    log_config.suppress_module_logging(HOT_PATH_MODULES)


def get_logger(name: str):
    """
    Get a logger instance for a component

    Args:
        name: Component name

    Returns:
        Logger instance
    """
    if not log_config._initialized:
        log_config.setup_logging()

    return logger.bind(component=name)


def _level_from_config() -> LogLevel:
    try:
        return LogLevel(config.log_level)
    except ValueError:
        return LogLevel.NORMAL


# Initialize default logging on import
if not log_config._initialized:
    log_config.setup_logging(_level_from_config())
