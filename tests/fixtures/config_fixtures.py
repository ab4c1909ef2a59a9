"""
Configuration test fixtures for the test suite.

Contains graph store configurations and batch manifests.
"""

# =============================================================================
# Graph Store Configuration Fixtures
# =============================================================================

SAMPLE_STORE_CONFIG = {
    "graph_store": {
        "server_url": "http://graph.example.org:7474",
        "rest_endpoint": "/db/data",
        "transaction_endpoint": "/transaction",
        "user": "neo4j",
        "password": "secret",
        "timeout": 10,
    }
}

MINIMAL_STORE_CONFIG = {
    "server_url": "http://localhost:7474",
}

# =============================================================================
# Batch Manifest Fixtures
# =============================================================================

SAMPLE_MANIFEST = {
    "server": "http://batch.example.org:7474",
    "ontologies": [
        {"o": "pizza.ttl", "n": "Pizza Ontology", "a": "pizza"},
        {
            "path": "go.ttl",
            "name": "Gene Ontology",
            "acronym": "go",
            "includeClosure": True,
            "eqp": ["http://purl.obolibrary.org/obo/BFO_0000050"],
        },
    ],
}
