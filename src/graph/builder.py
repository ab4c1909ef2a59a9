"""
Graph Mutation Builder

Translates the classification of one ontology into graph mutations:

- one ``Ontology`` metadata node
- the synthetic root class node ``OWL:Thing``
- per satisfiable class: its node, name and label, ``RDFS:subClassOf``
  edges to its direct superclasses, one edge per allow-listed existential
  restriction, and ``OWL:equivalentClass`` edges from its equivalent classes

Mutations are produced lazily so that each one can be sent as soon as it is
built.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterator, Optional

from constants import GraphSchema
from formats.owl.loader import OntologyDocument
from formats.owl.normalizer import normalize_id
from formats.owl.reasoner import ReasonerAdapter
from formats.owl.restrictions import extract_restrictions
from .mutations import (
    CreateNode,
    CreateRelationship,
    GraphMutation,
    PromoteLabel,
    SetProperty,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassEntity:
    """A class as it is written to the graph."""
    uri: str
    ont_id: str
    label: Optional[str] = None
    label_lang: Optional[str] = None
    satisfiable: bool = True


class GraphMutationBuilder:
    """
    Build idempotent graph mutations from reasoner output.

    Args:
        reasoner: Classified reasoner over the ontology (and its imports)
        document: Loaded ontology, used for the ontology IRI and labels
        acronym: Ontology acronym; ID space and extra label of every node
        existential_properties: IRIs of the object properties whose
            existential restrictions become relationships
    """

    def __init__(
        self,
        reasoner: ReasonerAdapter,
        document: OntologyDocument,
        acronym: str,
        existential_properties: AbstractSet[str] = frozenset(),
    ):
        self.reasoner = reasoner
        self.document = document
        self.acronym = acronym
        self.existential_properties = frozenset(existential_properties)

    def ont_id(self, uri: str) -> str:
        """Compact ID of a class or property URI."""
        if uri == GraphSchema.ROOT_CLASS_URI:
            return GraphSchema.ROOT_CLASS_ONT_ID
        return normalize_id(uri, self.acronym, self.document.namespace)

    def class_entity(self, uri: str) -> ClassEntity:
        label = self.document.get_label(uri)
        return ClassEntity(
            uri=uri,
            ont_id=self.ont_id(uri),
            label=label.text if label else None,
            label_lang=label.lang if label else None,
            satisfiable=self.reasoner.is_satisfiable(uri),
        )

    def _node(self, uri: str, ont_id: str, label: str = GraphSchema.CLASS_LABEL) -> Iterator[GraphMutation]:
        yield CreateNode(label, ont_id, uri)
        yield PromoteLabel(uri, self.acronym, label=label)
        yield SetProperty(uri, GraphSchema.NAME_KEY, ont_id, label=label)

    def _class_node(self, uri: str) -> Iterator[GraphMutation]:
        return self._node(uri, self.ont_id(uri))

    def ontology_mutations(self, name: str) -> Iterator[GraphMutation]:
        """Metadata node of the ontology itself."""
        iri = self.document.iri
        label = GraphSchema.ONTOLOGY_LABEL
        yield from self._node(iri, name, label=label)
        yield SetProperty(iri, "acronym", self.acronym, label=label)
        yield SetProperty(iri, "uri", iri, label=label)
        if self.document.version_iri:
            yield SetProperty(iri, "version", self.document.version_iri, label=label)

    def root_mutations(self) -> Iterator[GraphMutation]:
        """The synthetic ``owl:Thing`` root every top-level class points to."""
        yield from self._node(GraphSchema.ROOT_CLASS_URI, GraphSchema.ROOT_CLASS_ONT_ID)

    def class_mutations(self, uri: str) -> Iterator[GraphMutation]:
        """
        Mutations for one class, in emission order.

        Unsatisfiable classes produce nothing.
        """
        entity = self.class_entity(uri)
        if not entity.satisfiable:
            logger.debug(f"Skipping unsatisfiable class {uri}")
            return

        yield from self._node(entity.uri, entity.ont_id)

        if entity.label:
            yield SetProperty(entity.uri, GraphSchema.LABEL_KEY, entity.label)
        if entity.label_lang:
            yield SetProperty(entity.uri, GraphSchema.LABEL_LANG_KEY, entity.label_lang)

        yield from self._superclass_mutations(entity)
        yield from self._restriction_mutations(entity)
        yield from self._equivalence_mutations(entity)

    def _superclass_mutations(self, entity: ClassEntity) -> Iterator[GraphMutation]:
        groups = [
            group for group in self.reasoner.direct_superclass_groups(entity.uri)
            if not group.is_top
        ]

        if not groups:
            yield CreateRelationship(entity.uri, GraphSchema.ROOT_CLASS_URI, GraphSchema.SUBCLASS_OF)
            return

        for group in sorted(groups, key=lambda g: sorted(g.members)):
            for member in sorted(group.members_minus_bottom()):
                yield from self._class_node(member)
                yield CreateRelationship(entity.uri, member, GraphSchema.SUBCLASS_OF)

    def _restriction_mutations(self, entity: ClassEntity) -> Iterator[GraphMutation]:
        if not self.existential_properties:
            return

        restrictions = extract_restrictions(
            self.reasoner.subclass_axioms(entity.uri),
            self.existential_properties,
        )
        for prop, filler in sorted(restrictions):
            if not self.reasoner.is_satisfiable(filler):
                logger.debug(f"Skipping restriction {prop} on {entity.uri}: filler {filler} is unsatisfiable")
                continue
            yield from self._class_node(filler)
            yield CreateRelationship(entity.uri, filler, self.ont_id(prop))

    def _equivalence_mutations(self, entity: ClassEntity) -> Iterator[GraphMutation]:
        group = self.reasoner.equivalence_group(entity.uri)
        for other in sorted(group.members - {entity.uri}):
            yield from self._class_node(other)
            yield CreateRelationship(other, entity.uri, GraphSchema.EQUIVALENT_CLASS)
