"""
Graph mutations.

Every mutation renders to a single parameterized Cypher statement. Values
(URIs, names, labels) always travel as parameters; only node labels,
property keys and relationship types, which Cypher cannot parameterize, are
written into the statement text, quoted with backticks.

All mutations are safe to replay against an already populated store:
nodes are merged on ``uri`` and relationships are merged between matched
endpoints, so repeating an import never duplicates graph elements.
``SetProperty`` overwrites the previous value.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from constants import GraphSchema

Statement = Tuple[str, Dict[str, Any]]


def quote_identifier(name: str) -> str:
    """Backtick-quote a label, key or relationship type for Cypher."""
    return "`" + name.replace("`", "``") + "`"


@dataclass(frozen=True)
class CreateNode:
    """Merge a node keyed by its URI."""
    label: str
    ont_id: str
    uri: str

    def to_statement(self) -> Statement:
        return (
            f"MERGE (n:{quote_identifier(self.label)} {{uri: $uri}})",
            {"uri": self.uri},
        )


@dataclass(frozen=True)
class SetProperty:
    """Set (overwrite) a property on the node with the given URI."""
    uri: str
    key: str
    value: str
    label: str = GraphSchema.CLASS_LABEL

    def to_statement(self) -> Statement:
        return (
            f"MATCH (n:{quote_identifier(self.label)} {{uri: $uri}}) "
            f"SET n.{quote_identifier(self.key)} = $value",
            {"uri": self.uri, "value": self.value},
        )


@dataclass(frozen=True)
class CreateRelationship:
    """Merge a typed relationship between two existing nodes."""
    src_uri: str
    dst_uri: str
    rel_type: str
    src_label: str = GraphSchema.CLASS_LABEL
    dst_label: str = GraphSchema.CLASS_LABEL

    def to_statement(self) -> Statement:
        return (
            f"MATCH (src:{quote_identifier(self.src_label)} {{uri: $src_uri}}), "
            f"(dest:{quote_identifier(self.dst_label)} {{uri: $dest_uri}}) "
            f"MERGE (src)-[:{quote_identifier(self.rel_type)}]->(dest)",
            {"src_uri": self.src_uri, "dest_uri": self.dst_uri},
        )


@dataclass(frozen=True)
class PromoteLabel:
    """Add a further label, e.g. the ontology acronym, to a node."""
    uri: str
    new_label: str
    label: str = GraphSchema.CLASS_LABEL

    def to_statement(self) -> Statement:
        return (
            f"MATCH (n:{quote_identifier(self.label)} {{uri: $uri}}) "
            f"SET n:{quote_identifier(self.new_label)}",
            {"uri": self.uri},
        )


GraphMutation = Union[CreateNode, SetProperty, CreateRelationship, PromoteLabel]


def referenced_uris(mutation: GraphMutation) -> Tuple[str, ...]:
    """URIs of all nodes a mutation touches."""
    if isinstance(mutation, CreateRelationship):
        return (mutation.src_uri, mutation.dst_uri)
    return (mutation.uri,)
