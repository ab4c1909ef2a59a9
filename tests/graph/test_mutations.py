"""
Tests for rendering graph mutations as parameterized Cypher.
"""

import pytest

from graph.mutations import (
    CreateNode,
    CreateRelationship,
    PromoteLabel,
    SetProperty,
    quote_identifier,
    referenced_uris,
)

URI = "http://x.org/onto#A"
OTHER = "http://x.org/onto#B"


@pytest.mark.unit
class TestQuoteIdentifier:

    def test_plain(self):
        assert quote_identifier("Class") == "`Class`"

    def test_embedded_backtick_is_doubled(self):
        assert quote_identifier("a`b") == "`a``b`"

    def test_colon_is_safe_inside_quotes(self):
        assert quote_identifier("RDFS:subClassOf") == "`RDFS:subClassOf`"


@pytest.mark.unit
class TestStatements:

    def test_create_node_merges_on_uri(self):
        statement, parameters = CreateNode("Class", "ONTO:A", URI).to_statement()
        assert statement == "MERGE (n:`Class` {uri: $uri})"
        assert parameters == {"uri": URI}

    def test_set_property(self):
        statement, parameters = SetProperty(URI, "rdfs:label", "It's \"quoted\"").to_statement()
        assert statement == "MATCH (n:`Class` {uri: $uri}) SET n.`rdfs:label` = $value"
        assert parameters == {"uri": URI, "value": "It's \"quoted\""}

    def test_set_property_on_ontology_node(self):
        statement, _ = SetProperty(URI, "acronym", "ONTO", label="Ontology").to_statement()
        assert statement.startswith("MATCH (n:`Ontology` {uri: $uri})")

    def test_relationship_merges_between_matched_endpoints(self):
        statement, parameters = CreateRelationship(URI, OTHER, "RDFS:subClassOf").to_statement()
        assert statement == (
            "MATCH (src:`Class` {uri: $src_uri}), (dest:`Class` {uri: $dest_uri}) "
            "MERGE (src)-[:`RDFS:subClassOf`]->(dest)"
        )
        assert parameters == {"src_uri": URI, "dest_uri": OTHER}

    def test_promote_label(self):
        statement, parameters = PromoteLabel(URI, "ONTO").to_statement()
        assert statement == "MATCH (n:`Class` {uri: $uri}) SET n:`ONTO`"
        assert parameters == {"uri": URI}

    def test_values_never_appear_in_statement_text(self):
        hostile = "x}) DETACH DELETE n //"
        for mutation in (
            CreateNode("Class", hostile, hostile),
            SetProperty(hostile, "name", hostile),
            CreateRelationship(hostile, hostile, "T"),
            PromoteLabel(hostile, "ONTO"),
        ):
            statement, parameters = mutation.to_statement()
            assert hostile not in statement
            assert hostile in parameters.values()

    def test_mutations_are_hashable_values(self):
        assert CreateNode("Class", "ONTO:A", URI) == CreateNode("Class", "ONTO:A", URI)
        assert len({PromoteLabel(URI, "ONTO"), PromoteLabel(URI, "ONTO")}) == 1


@pytest.mark.unit
def test_referenced_uris():
    assert referenced_uris(CreateRelationship(URI, OTHER, "T")) == (URI, OTHER)
    assert referenced_uris(SetProperty(URI, "name", "A")) == (URI,)
