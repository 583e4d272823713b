"""
Logging Package for doc-criteria

Provides per-component loggers with optional rotating file output.
"""

from .manager import LoggingManager, get_logger, get_logging_manager, log_with_context

__all__ = ['LoggingManager', 'get_logger', 'get_logging_manager', 'log_with_context']
