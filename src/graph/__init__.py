"""
Graph package - graph mutations and their construction from ontologies.

``graph.builder`` is imported explicitly; it depends on ``formats.owl``.
"""

from .mutations import (
    CreateNode,
    CreateRelationship,
    GraphMutation,
    PromoteLabel,
    SetProperty,
    quote_identifier,
    referenced_uris,
)

__all__ = [
    'CreateNode',
    'CreateRelationship',
    'GraphMutation',
    'PromoteLabel',
    'SetProperty',
    'quote_identifier',
    'referenced_uris',
]
