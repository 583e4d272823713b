#!/usr/bin/env python3
"""
Centralized Logging Manager for doc-criteria

Loggers propagate to the host application's logging by default.
When DOC_CRITERIA_LOG_DIR is set, each component also writes to its own
rotating log file under that directory.
"""

import os
import json
import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Dict, Any

ROOT_LOGGER_NAME = "doc-criteria"


class LoggingManager:
    """
    Manages loggers for all doc-criteria components.

    Features:
    - Propagates to the application's handlers unless a log dir is configured
    - Component-specific log files with rotation (DOC_CRITERIA_LOG_DIR)
    - Debug mode support via DOC_CRITERIA_DEBUG
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the logging manager (singleton)"""
        if not self._initialized:
            log_dir = os.environ.get('DOC_CRITERIA_LOG_DIR')
            self.log_dir = Path(log_dir) if log_dir else None
            self.debug_mode = os.environ.get('DOC_CRITERIA_DEBUG', '').lower() in ('1', 'true', 'yes')
            self.loggers: Dict[str, logging.Logger] = {}
            self._initialized = True

            if self.log_dir is not None:
                self.log_dir.mkdir(parents=True, exist_ok=True)

            # Libraries stay silent unless the application configures logging
            logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

    def get_logger(self, name: str, component: Optional[str] = None) -> logging.Logger:
        """
        Get or create a logger for a specific component.

        Args:
            name: Logger name (e.g., 'QueryFilterParser')
            component: Component category ('filters', 'criteria', None for main)

        Returns:
            Configured logger instance
        """
        logger_key = f"{component}.{name}" if component else name

        if logger_key in self.loggers:
            return self.loggers[logger_key]

        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{logger_key}")
        if self.debug_mode:
            logger.setLevel(logging.DEBUG)

        if self.log_dir is not None:
            self._add_file_handlers(logger, name, component)

        self.loggers[logger_key] = logger
        return logger

    def _add_file_handlers(self, logger: logging.Logger, name: str, component: Optional[str]):
        """Attach rotating file handlers for a component."""
        if component:
            component_dir = self.log_dir / component
            component_dir.mkdir(parents=True, exist_ok=True)
            log_file = component_dir / f"{name.lower()}.log"
        else:
            log_file = self.log_dir / f"{name.lower()}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )

        if self.debug_mode:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / 'error.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d]\n%(message)s\n',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        error_handler.setLevel(logging.ERROR)
        logger.addHandler(error_handler)

    def log_with_context(self, logger: logging.Logger, level: int, message: str,
                         context: Optional[Dict[str, Any]] = None):
        """
        Log a message with additional context.

        Args:
            logger: Logger instance
            level: Log level
            message: Log message
            context: Additional context dict
        """
        if not logger.isEnabledFor(level):
            return

        if context:
            context_str = json.dumps(context, default=str)
            full_message = f"{message} | Context: {context_str}"
        else:
            full_message = message

        logger.log(level, full_message)


# Singleton instance
_logging_manager = None


def get_logging_manager() -> LoggingManager:
    """Get the singleton LoggingManager instance"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def get_logger(name: str, component: Optional[str] = None) -> logging.Logger:
    """
    Convenience function to get a logger.

    Args:
        name: Logger name
        component: Component type ('filters', 'criteria', or None)

    Returns:
        Configured logger
    """
    return get_logging_manager().get_logger(name, component)


def log_with_context(logger: logging.Logger, level: int, message: str,
                     context: Optional[Dict[str, Any]] = None):
    """Log through the singleton manager with a JSON context suffix."""
    get_logging_manager().log_with_context(logger, level, message, context)
