"""
OWL package - reading and classifying OWL ontologies.

Components:
- loader: document parsing, import closure, class signature and labels
- expressions: class expression tree parsed from RDF
- reasoner: reasoner protocol and the structural reasoner
- normalizer: URI to compact ID conversion
- restrictions: existential restriction extraction
"""

from .expressions import (
    ClassExpression,
    ComplementOf,
    ExistentialRestriction,
    IntersectionOf,
    NamedClass,
    Other,
    UnionOf,
    parse_class_expression,
)
from .loader import Label, OntologyDocument, OntologyLoadError, load_ontology
from .normalizer import extract_uri, normalize_id
from .reasoner import (
    ClassGroup,
    InconsistentOntologyError,
    ReasonerAdapter,
    StructuralReasoner,
)
from .restrictions import extract_restrictions

__all__ = [
    'ClassExpression',
    'ComplementOf',
    'ExistentialRestriction',
    'IntersectionOf',
    'NamedClass',
    'Other',
    'UnionOf',
    'parse_class_expression',
    'Label',
    'OntologyDocument',
    'OntologyLoadError',
    'load_ontology',
    'extract_uri',
    'normalize_id',
    'ClassGroup',
    'InconsistentOntologyError',
    'ReasonerAdapter',
    'StructuralReasoner',
    'extract_restrictions',
]
