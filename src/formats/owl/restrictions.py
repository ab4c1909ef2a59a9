"""
Existential restriction extraction.

Existential (``someValuesFrom``) restrictions on a configured set of object
properties are treated as class-level relationships, e.g.
``Margherita ⊑ hasTopping some MozzarellaTopping`` becomes a
``PIZZA:hasTopping`` edge from Margherita to MozzarellaTopping.
"""

import logging
from typing import AbstractSet, FrozenSet, Iterable, Set, Tuple

from .expressions import (
    ClassExpression,
    ExistentialRestriction,
    IntersectionOf,
    is_anonymous,
    UnionOf,
)

logger = logging.getLogger(__name__)

# (property IRI, filler class IRI)
Restriction = Tuple[str, str]


def _collect(expression: ClassExpression, properties: AbstractSet[str], found: Set[Restriction]) -> None:
    if isinstance(expression, ExistentialRestriction):
        filler = expression.filler
        if is_anonymous(filler):
            _collect(filler, properties, found)
        elif expression.property in properties:
            found.add((expression.property, filler.uri))
    elif isinstance(expression, (IntersectionOf, UnionOf)):
        for operand in expression.operands:
            _collect(operand, properties, found)
    # Named classes, complements and opaque expressions carry no
    # existential restriction of their own.


def extract_restrictions(
    superclass_expressions: Iterable[ClassExpression],
    properties: AbstractSet[str],
) -> FrozenSet[Restriction]:
    """
    Collect allow-listed existential restrictions from subclass axioms.

    Args:
        superclass_expressions: Superclass side of a class's direct
            ``rdfs:subClassOf`` axioms
        properties: IRIs of the object properties to extract

    Returns:
        Deduplicated ``(property, filler)`` pairs whose filler is a named class
    """
    if not properties:
        return frozenset()

    found: Set[Restriction] = set()
    for expression in superclass_expressions:
        _collect(expression, properties, found)

    return frozenset(found)
