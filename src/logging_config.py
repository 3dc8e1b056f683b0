"""
Logging Configuration for the GM Trade Engine

Sets up the trade engine's logging:
- Rotating file handlers for the main, debug and error streams
- A colored console handler for interactive sessions
- Per-subsystem log levels (transactions, salary_cap, team_management)
- Presets for development, production and test runs

Usage Example:
    from logging_config import setup_logging, get_logger

    setup_logging(level="INFO", log_dir="logs")

    logger = get_logger(__name__)
    logger.info("Trade deadline day started")

Log Files Created:
- logs/trade_engine.log: Main log (INFO+)
- logs/trade_engine_debug.log: Debug log (DEBUG+), includes rejected trade candidates
- logs/trade_engine_error.log: Error log (ERROR+)

Each file rotates at 10MB and keeps 5 backups.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Dict, Optional


DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)

SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (file name, minimum level, format override)
LOG_FILES = (
    ("trade_engine.log", logging.INFO, None),
    ("trade_engine_debug.log", logging.DEBUG, DETAILED_FORMAT),
    ("trade_engine_error.log", logging.ERROR, DETAILED_FORMAT),
)

# Engine subsystems that can be tuned independently
ENGINE_LOGGERS = {
    "transactions": (
        "transactions.cpu_trade_simulator",
        "transactions.trade_offer_generator",
        "transactions.counter_offer_generator",
        "transactions.trade_executor",
        "transactions.transaction_ai_manager",
    ),
    "salary_cap": (
        "salary_cap.cap_validator",
    ),
    "team_management": (
        "team_management.team_needs_analyzer",
    ),
    "persistence": (
        "persistence.transaction_log",
    ),
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in ANSI colors."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    def format(self, record):
        original = record.levelname
        if original in self.COLORS:
            record.levelname = f"{self.COLORS[original]}{original}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = original


def _level(level: str) -> int:
    value = getattr(logging, level.upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_console: bool = True,
    enable_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    format_style: str = "detailed"
) -> None:
    """
    Configure the root logger for a trade engine session.

    Call once at startup. Calling again replaces the existing handlers.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log files
        enable_console: Whether to log to stderr
        enable_file: Whether to write log files
        max_bytes: Size at which each file rotates
        backup_count: Rotated files kept per log
        format_style: "detailed" or "simple" for the main log

    Raises:
        ValueError: If level is not a logging level name

    Example:
        >>> setup_logging(level="DEBUG", enable_file=False)
        >>> get_logger("transactions").debug("Candidate rejected")
    """
    root_level = _level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()

    main_format = DETAILED_FORMAT if format_style == "detailed" else SIMPLE_FORMAT

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(root_level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if enable_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        for file_name, file_level, file_format in LOG_FILES:
            handler = logging.handlers.RotatingFileHandler(
                filename=os.path.join(log_dir, file_name),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            handler.setLevel(file_level)
            handler.setFormatter(
                logging.Formatter(file_format or main_format, datefmt=DATE_FORMAT)
            )
            root_logger.addHandler(handler)

    root_logger.info(
        f"Logging initialized - Level: {level}, "
        f"Console: {enable_console}, File: {enable_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (typically ``__name__``)."""
    return logging.getLogger(name)


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    context: Optional[Dict[str, object]] = None,
    level: str = "ERROR"
) -> None:
    """
    Log an exception with its traceback and key=value context.

    Args:
        logger: Logger instance
        exception: Exception to log
        context: Extra context such as team_id or date
        level: Log level (default: ERROR)

    Example:
        >>> try:
        ...     executor.execute_trade(user_team, partner, sent, received, day)
        ... except TradeException as e:
        ...     log_exception(logger, e, context={"team_id": user_team.team_id})
    """
    context_str = ""
    if context:
        context_str = " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

    logger.log(
        _level(level),
        f"Exception occurred{context_str}: {type(exception).__name__}: {exception}",
        exc_info=True
    )


def configure_module_logger(
    module_name: str,
    level: Optional[str] = None,
    propagate: bool = True
) -> logging.Logger:
    """
    Set the level and propagation of a single module logger.

    Args:
        module_name: Dotted logger name, e.g. "transactions.cpu_trade_simulator"
        level: Level for this logger (None keeps the inherited level)
        propagate: Whether records reach the root handlers

    Returns:
        The configured logger
    """
    logger = logging.getLogger(module_name)

    if level:
        logger.setLevel(_level(level))

    logger.propagate = propagate

    return logger


class LogContext:
    """
    Context manager that temporarily changes a logger's level.

    Example:
        >>> logger = get_logger("transactions.cpu_trade_simulator")
        >>> with LogContext(logger, "DEBUG"):
        ...     simulator.run_cpu_trade_round(teams, user_team_id, day)
    """

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = _level(level)
        self.original_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.original_level)


# Subsystem configurations

def setup_subsystem_logging(subsystem: str, level: str = "INFO") -> None:
    """
    Configure every logger belonging to an engine subsystem.

    Args:
        subsystem: Key of ENGINE_LOGGERS ("transactions", "salary_cap", ...)
        level: Level applied to the package logger and its modules

    Raises:
        ValueError: If the subsystem is unknown
    """
    if subsystem not in ENGINE_LOGGERS:
        raise ValueError(
            f"Unknown subsystem '{subsystem}'. Valid: {sorted(ENGINE_LOGGERS)}"
        )
    configure_module_logger(subsystem, level=level)
    for module_name in ENGINE_LOGGERS[subsystem]:
        configure_module_logger(module_name, level=level)


def setup_transactions_logging(level: str = "INFO") -> None:
    """
    Configure logging for trade generation and execution.

    DEBUG shows every rejected CPU trade candidate with the failing check.
    """
    setup_subsystem_logging("transactions", level=level)


def setup_salary_cap_logging(level: str = "WARNING") -> None:
    """Configure logging for salary matching. Verbose, so WARNING by default."""
    setup_subsystem_logging("salary_cap", level=level)


# Quick setup presets

def setup_production_logging(log_dir: str = "logs") -> None:
    """INFO to files only, simple format."""
    setup_logging(
        level="INFO",
        log_dir=log_dir,
        enable_console=False,
        enable_file=True,
        format_style="simple"
    )


def setup_development_logging(log_dir: str = "logs") -> None:
    """
    Setup logging for development.

    Configuration:
    - Level: DEBUG
    - Console: Yes (colored)
    - File: Yes
    - Detailed format with file/line numbers
    """
    setup_logging(
        level="DEBUG",
        log_dir=log_dir,
        enable_console=True,
        enable_file=True,
        format_style="detailed"
    )


def setup_testing_logging() -> None:
    """WARNING to the console only, so test output stays readable."""
    setup_logging(
        level="WARNING",
        log_dir="logs",
        enable_console=True,
        enable_file=False,
        format_style="simple"
    )
