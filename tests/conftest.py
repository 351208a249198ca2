"""
Pytest configuration and fixtures for solr_mapper tests.

Provides a mock transport, canned Solr responses and environment cleanup.
"""

import os
from unittest.mock import Mock
import pytest

from solr_mapper.application.client import SolrClient
from solr_mapper.domain.interfaces import SolrConnection


EMPTY_DOC_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<response>
<lst name="responseHeader"><int name="status">0</int><int name="QTime">0</int><lst name="params"><str name="q">id:123456</str><str name="?"/><str name="version">2.2</str></lst></lst><result name="response" numFound="1" start="0"><doc></doc></result>
</response>
"""

EXTRA_FIELDS_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<response>
<lst name="responseHeader"><int name="status">0</int><int name="QTime">0</int></lst><result name="response" numFound="1" start="0"><doc><str name="advancedview"/><str name="basicview"/><int name="id">123456</int></doc></result>
</response>
"""


@pytest.fixture
def empty_doc_response():
    """Response with numFound=1 and a single empty doc."""
    return EMPTY_DOC_RESPONSE


@pytest.fixture
def extra_fields_response():
    """Response whose doc carries fields most document classes do not declare."""
    return EXTRA_FIELDS_RESPONSE


@pytest.fixture
def mock_connection():
    """Mock transport answering every GET with the empty-doc response."""
    mock = Mock(spec=SolrConnection)
    mock.get.return_value = EMPTY_DOC_RESPONSE
    mock.post.return_value = ""
    return mock


@pytest.fixture
def client(mock_connection):
    """Client bound to the mock transport."""
    return SolrClient(mock_connection)


@pytest.fixture
def clean_environment():
    """Clean environment variables for testing."""
    env_vars_to_clean = [
        'SOLR_URL',
        'SOLR_HTTP_TIMEOUT',
        'SOLR_LOG_LEVEL',
    ]

    original_env = {}
    for var in env_vars_to_clean:
        if var in os.environ:
            original_env[var] = os.environ[var]
            del os.environ[var]

    yield

    # Restore original environment
    for var, value in original_env.items():
        os.environ[var] = value


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as CLI command test"
    )
    config.addinivalue_line(
        "markers", "env: mark test as environment resolution test"
    )
