"""
Centralized test fixtures for the OWL to graph importer test suite.

This package provides reusable fixtures for testing, including:
- OWL ontologies in Turtle
- Graph store configurations and batch manifests

Usage:
    from fixtures import PIZZA_TTL, SAMPLE_STORE_CONFIG

Or use the pytest fixtures in conftest.py which import from here.
"""

from .owl_fixtures import (
    # Pizza-style ontology
    PIZZA_TTL,
    PIZZA_NS,
    PIZZA_IRI,
    HAS_TOPPING,
    HAS_BASE,

    # OBO-style ontology
    OBO_TTL,
    OBO_NS,
    OBO_IRI,
    PART_OF,

    # Edge cases
    EDGE_CASES_TTL,
    EDGE_NS,
    EDGE_IRI,
    INCONSISTENT_TTL,
    NO_IRI_TTL,

    # Import closure
    IMPORT_BASE_TTL,
    IMPORT_ROOT_TTL,
)

from .config_fixtures import (
    SAMPLE_STORE_CONFIG,
    MINIMAL_STORE_CONFIG,
    SAMPLE_MANIFEST,
)
