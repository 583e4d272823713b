"""
Exception classes for doc-criteria.
"""


class CriteriaError(Exception):
    """Base exception for all doc-criteria errors."""
    pass


class QueryError(CriteriaError):
    """Raised when a request query cannot be turned into criteria."""
    pass


class QueryDecodeError(QueryError):
    """Raised when the raw query string is not a legal URL-encoded query."""

    def __init__(self, query: str, reason: str):
        super().__init__(f"Invalid query string: {reason}")
        self.query = query
        self.reason = reason


class ConfigurationError(CriteriaError):
    """Raised when configuration values are invalid."""
    pass
