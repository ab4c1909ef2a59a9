"""
OWL class expression model.

Class expressions are parsed from their RDF serialization into a small tagged
tree so that consumers can match on structure instead of querying the graph:

- NamedClass: a class IRI
- ExistentialRestriction: ``property some filler``
- IntersectionOf / UnionOf: ``owl:intersectionOf`` / ``owl:unionOf`` lists
- ComplementOf: ``owl:complementOf``
- Other: any construct the importer does not interpret (universal, value and
  cardinality restrictions, enumerations, malformed nodes)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Set, Tuple, Union

from rdflib import Graph, OWL, RDF, BNode, URIRef
from rdflib.collection import Collection
from rdflib.term import Node

from constants import ProcessingLimits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedClass:
    """A class referenced by IRI."""
    uri: str


@dataclass(frozen=True)
class ExistentialRestriction:
    """``owl:someValuesFrom`` restriction on a named object property."""
    property: str
    filler: 'ClassExpression'


@dataclass(frozen=True)
class IntersectionOf:
    operands: Tuple['ClassExpression', ...]


@dataclass(frozen=True)
class UnionOf:
    operands: Tuple['ClassExpression', ...]


@dataclass(frozen=True)
class ComplementOf:
    operand: 'ClassExpression'


@dataclass(frozen=True)
class Other:
    """Class expression that is kept opaque."""
    kind: str = "unknown"


ClassExpression = Union[NamedClass, ExistentialRestriction, IntersectionOf, UnionOf, ComplementOf, Other]


def is_anonymous(expression: ClassExpression) -> bool:
    """Return True unless the expression is a named class."""
    return not isinstance(expression, NamedClass)


def parse_class_expression(
    graph: Graph,
    node: Node,
    max_depth: int = ProcessingLimits.MAX_EXPRESSION_DEPTH,
    _visited: Optional[Set[Node]] = None,
) -> ClassExpression:
    """
    Parse the class expression rooted at ``node``.

    Blank nodes are tracked along the current path, so cyclic or overly deep
    structures degrade to ``Other`` rather than recursing forever.

    Args:
        graph: Graph holding the expression triples
        node: URIRef of a named class or BNode of an anonymous expression
        max_depth: Maximum nesting depth to follow

    Returns:
        The parsed expression tree
    """
    if isinstance(node, URIRef):
        return NamedClass(str(node))

    if not isinstance(node, BNode):
        return Other("literal")

    visited = _visited or set()
    if node in visited:
        logger.warning(f"Cyclic class expression at blank node {node}")
        return Other("cycle")
    if max_depth <= 0:
        logger.warning(f"Class expression nested deeper than {ProcessingLimits.MAX_EXPRESSION_DEPTH} levels")
        return Other("too-deep")

    path = visited | {node}

    def _parse(child: Node) -> ClassExpression:
        return parse_class_expression(graph, child, max_depth - 1, path)

    on_property = graph.value(node, OWL.onProperty)
    if on_property is not None:
        some_values = graph.value(node, OWL.someValuesFrom)
        if some_values is None:
            return Other("restriction")
        if not isinstance(on_property, URIRef):
            # Inverse or otherwise anonymous property expressions.
            return Other("anonymous-property")
        return ExistentialRestriction(str(on_property), _parse(some_values))

    intersection = graph.value(node, OWL.intersectionOf)
    if intersection is not None:
        return IntersectionOf(tuple(_parse(item) for item in Collection(graph, intersection)))

    union = graph.value(node, OWL.unionOf)
    if union is not None:
        return UnionOf(tuple(_parse(item) for item in Collection(graph, union)))

    complement = graph.value(node, OWL.complementOf)
    if complement is not None:
        return ComplementOf(_parse(complement))

    if graph.value(node, OWL.oneOf) is not None:
        return Other("enumeration")

    kind = graph.value(node, RDF.type)
    return Other(str(kind) if kind is not None else "unknown")


def named_classes(expression: ClassExpression) -> Set[str]:
    """IRIs of every named class referenced anywhere in ``expression``."""
    if isinstance(expression, NamedClass):
        return {expression.uri}
    if isinstance(expression, ExistentialRestriction):
        return named_classes(expression.filler)
    if isinstance(expression, (IntersectionOf, UnionOf)):
        found: Set[str] = set()
        for operand in expression.operands:
            found |= named_classes(operand)
        return found
    if isinstance(expression, ComplementOf):
        return named_classes(expression.operand)
    return set()
