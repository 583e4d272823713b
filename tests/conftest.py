"""
Shared pytest fixtures for doc-criteria tests.
"""

import sys
import logging
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from doc_criteria import parse_query
from doc_criteria.filters import QueryFilterParser, DocumentFilterBackend

# Keep library logging quiet during tests
logging.basicConfig(level=logging.CRITICAL)


@pytest.fixture
def parser():
    """Provide a QueryFilterParser instance."""
    return QueryFilterParser()


@pytest.fixture
def backend():
    """Provide a DocumentFilterBackend instance."""
    return DocumentFilterBackend()


@pytest.fixture
def compile_filter(parser, backend):
    """Parse a raw query string and render the named filter."""
    def _compile(query, name="filters"):
        return backend.convert(parser.parse_filter(parse_query(query), name))
    return _compile
