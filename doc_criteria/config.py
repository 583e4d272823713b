"""
Configuration helpers for doc-criteria.
Supports environment variables for deployment configuration.
"""

import os
from typing import Dict, Any

from .exceptions import ConfigurationError

DEFAULT_FILTER_NAME = "filters"
DEFAULT_SIZE = 20


class Config:
    """
    Configuration helper that reads from environment variables.

    Environment variables:
        DOC_CRITERIA_FILTER_NAME: Parameter name holding filter groups (default: filters)
        DOC_CRITERIA_DEFAULT_SIZE: Page size when none is requested (default: 20)
        DOC_CRITERIA_LOG_DIR: Directory for rotating log files (read by log_manager)
        DOC_CRITERIA_DEBUG: Enable debug logging (read by log_manager)
    """

    @staticmethod
    def from_env() -> Dict[str, Any]:
        """
        Create configuration from environment variables.

        Returns:
            Dict with configuration parameters for CriteriaResolver

        Raises:
            ConfigurationError: If DOC_CRITERIA_DEFAULT_SIZE is not a positive integer

        Example:
            from doc_criteria import CriteriaResolver
            from doc_criteria.config import Config

            resolver = CriteriaResolver(**Config.from_env())
        """
        raw_size = os.getenv("DOC_CRITERIA_DEFAULT_SIZE")
        default_size = DEFAULT_SIZE
        if raw_size:
            try:
                default_size = int(raw_size)
            except ValueError as e:
                raise ConfigurationError(
                    f"DOC_CRITERIA_DEFAULT_SIZE must be an integer, got {raw_size!r}"
                ) from e
            if default_size <= 0:
                raise ConfigurationError(
                    f"DOC_CRITERIA_DEFAULT_SIZE must be positive, got {default_size}"
                )

        return {
            "filter_name": os.getenv("DOC_CRITERIA_FILTER_NAME", DEFAULT_FILTER_NAME),
            "default_size": default_size
        }

    @staticmethod
    def defaults() -> Dict[str, Any]:
        """
        Configuration without reading the environment.

        Returns:
            Configuration dict with the built-in defaults
        """
        return {
            "filter_name": DEFAULT_FILTER_NAME,
            "default_size": DEFAULT_SIZE
        }
