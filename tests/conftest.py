"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Integration tests
    pytest -m security      # Security-related tests

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import json
import os
import sys
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    # Ensure src directory stays ahead of tests for module resolution
    sys.path.insert(1, tests_dir)

from fixtures import (
    PIZZA_TTL,
    OBO_TTL,
    EDGE_CASES_TTL,
    INCONSISTENT_TTL,
    IMPORT_BASE_TTL,
    IMPORT_ROOT_TTL,
    SAMPLE_STORE_CONFIG,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Integration tests requiring setup")
    config.addinivalue_line("markers", "security: Security-related tests (path traversal, symlinks)")


# =============================================================================
# Helpers
# =============================================================================

def create_mock_response(status_code=200, json_data=None, headers=None, text=None):
    """Create a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_data is not None:
        response.json.return_value = json_data
        response.text = text if text is not None else json.dumps(json_data)
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    return response


def write_ontology(directory, filename, content):
    """Write an ontology document and return its path as string."""
    path = directory / filename
    path.write_text(content, encoding='utf-8')
    return str(path)


# =============================================================================
# OWL Fixtures
# =============================================================================

@pytest.fixture
def pizza_owl_file(tmp_path):
    """Pizza-style ontology on disk."""
    return write_ontology(tmp_path, "pizza.ttl", PIZZA_TTL)


@pytest.fixture
def obo_owl_file(tmp_path):
    """OBO-style ontology on disk."""
    return write_ontology(tmp_path, "go.ttl", OBO_TTL)


@pytest.fixture
def edge_cases_owl_file(tmp_path):
    """Ontology with top-equivalent, unsatisfiable and blank-label classes."""
    return write_ontology(tmp_path, "edge.ttl", EDGE_CASES_TTL)


@pytest.fixture
def inconsistent_owl_file(tmp_path):
    return write_ontology(tmp_path, "inconsistent.ttl", INCONSISTENT_TTL)


@pytest.fixture
def import_closure_dir(tmp_path):
    """Directory with a root ontology importing a local base ontology."""
    write_ontology(tmp_path, "base.ttl", IMPORT_BASE_TTL)
    write_ontology(tmp_path, "root.ttl", IMPORT_ROOT_TTL)
    return tmp_path


@pytest.fixture
def pizza_document(pizza_owl_file):
    from formats.owl.loader import load_ontology
    return load_ontology(pizza_owl_file)


@pytest.fixture
def pizza_reasoner(pizza_document):
    from formats.owl.reasoner import StructuralReasoner
    reasoner = StructuralReasoner(pizza_document.closure)
    reasoner.classify()
    return reasoner


# =============================================================================
# Graph Store Fixtures
# =============================================================================

@pytest.fixture
def store_config():
    """Graph store configuration pointing at a fake server."""
    from core.graph_client import GraphStoreConfig
    return GraphStoreConfig.from_dict(SAMPLE_STORE_CONFIG)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file for testing."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(SAMPLE_STORE_CONFIG, indent=2))
    return str(config_file)


class FakeGraphStore:
    """
    Records the requests a GraphStoreClient session makes.

    Begin returns a Location header with handle ``42``; every other POST
    succeeds with an empty errors list unless ``fail_on`` matches the
    statement text.
    """

    def __init__(self, fail_on=None, commit_errors=None, commit_status=200):
        self.fail_on = fail_on
        self.commit_errors = commit_errors or []
        self.commit_status = commit_status
        self.requests = []

    @property
    def statements(self):
        return [
            payload["statements"][0]
            for method, url, payload in self.requests
            if method == 'POST' and payload and payload.get("statements")
        ]

    def request(self, method, url, timeout=None, json=None, **kwargs):
        self.requests.append((method, url, json))
        if method == 'GET':
            return create_mock_response(200, {})
        if url.endswith('/transaction'):
            return create_mock_response(
                201,
                {"commit": url + "/42/commit", "results": [], "errors": []},
                headers={"Location": url + "/42"},
            )
        if url.endswith('/commit'):
            return create_mock_response(self.commit_status, {"results": [], "errors": self.commit_errors})
        statement = json["statements"][0]["statement"]
        if self.fail_on and self.fail_on in statement:
            return create_mock_response(
                200,
                {"results": [], "errors": [{"code": "Neo.ClientError.Statement.SyntaxError", "message": "Invalid input"}]},
            )
        return create_mock_response(200, {"results": [], "errors": []})


@pytest.fixture
def fake_store():
    return FakeGraphStore()


@pytest.fixture
def graph_client(store_config, fake_store):
    """GraphStoreClient whose session talks to a FakeGraphStore."""
    from core.graph_client import GraphStoreClient
    client = GraphStoreClient(store_config)
    client.session.request = fake_store.request
    yield client
    client.close()
