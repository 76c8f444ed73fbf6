#!/usr/bin/env python3
"""
ParFlow Utilities Module

Logging for the ``parflow`` package. Importing the package installs a console
handler; the CLI later raises or lowers the level and may attach a log file
once settings are known.
"""
import sys
import logging
from pathlib import Path
from typing import Optional


PACKAGE_LOGGER = "parflow"
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "parflow.log"


def _level(log_level: str) -> int:
    return getattr(logging, str(log_level).upper(), logging.INFO)


class LoggingConfig:
    """Handlers and level of the package logger"""

    _initialized = False

    @classmethod
    def _formatter(cls) -> logging.Formatter:
        return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    @classmethod
    def setup_logging(cls,
                      log_level: str = "INFO",
                      log_file: Optional[str] = None,
                      enable_console: bool = True) -> None:
        """
        Install the console handler once, then attach ``log_file`` if given.

        Later calls only add a file handler; use set_level to change levels.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to a log file (optional)
            enable_console: Log to stdout
        """
        logger = logging.getLogger(PACKAGE_LOGGER)

        if not cls._initialized:
            logger.setLevel(_level(log_level))
            if enable_console:
                console_handler = logging.StreamHandler(sys.stdout)
                console_handler.setLevel(_level(log_level))
                console_handler.setFormatter(cls._formatter())
                logger.addHandler(console_handler)
            cls._initialized = True
            logger.debug(f"Logging initialized - Level: {log_level}")

        if log_file:
            cls.add_file_handler(log_file)

    @classmethod
    def add_file_handler(cls, log_file: str) -> Path:
        """Attach a file handler at the current level; a path is attached once"""
        logger = logging.getLogger(PACKAGE_LOGGER)
        path = Path(log_file).resolve()
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == path:
                return path

        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding='utf-8')
        file_handler.setLevel(logger.level)
        file_handler.setFormatter(cls._formatter())
        logger.addHandler(file_handler)
        logger.debug(f"Logging to {path}")
        return path

    @classmethod
    def set_level(cls, log_level: str) -> None:
        """Change the level of the package logger and all its handlers"""
        logger = logging.getLogger(PACKAGE_LOGGER)
        logger.setLevel(_level(log_level))
        for handler in logger.handlers:
            handler.setLevel(_level(log_level))

    @classmethod
    def get_logger(cls, name: Optional[str] = None) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()
        return logging.getLogger(name or PACKAGE_LOGGER)


def setup_parflow_logging(log_level: str = "INFO",
                          log_dir: Optional[str] = None) -> Optional[Path]:
    """
    Configure package logging; with ``log_dir``, also write ``parflow.log`` there.

    Returns:
        Path of the log file, or None when logging to the console only
    """
    log_file = str(Path(log_dir) / LOG_FILE_NAME) if log_dir else None
    LoggingConfig.setup_logging(log_level=log_level, log_file=log_file)
    return Path(log_file).resolve() if log_file else None


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for a specific module"""
    return LoggingConfig.get_logger(module_name)
