"""
Reasoner adapter.

The importer only needs a handful of classification results, captured by the
``ReasonerAdapter`` protocol. ``StructuralReasoner`` implements it from the
told axioms of an rdflib graph:

- subsumption: transitive closure of named ``rdfs:subClassOf`` axioms, named
  ``owl:equivalentClass`` axioms (both directions) and the named operands of
  intersections on the superclass side
- equivalence: classes that subsume each other
- unsatisfiability: subsumption by ``owl:Nothing``, or by two classes that
  are declared disjoint (``owl:disjointWith``, ``owl:AllDisjointClasses``,
  ``owl:disjointUnionOf``, ``owl:complementOf`` of a named class)
- consistency: ``owl:Thing`` is satisfiable and no individual is typed with
  an unsatisfiable combination of classes

It does not perform tableau reasoning; inferences that need it are not made.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Protocol, Set, runtime_checkable

from rdflib import Graph, OWL, RDF, RDFS, URIRef
from rdflib.collection import Collection

from .expressions import (
    ClassExpression,
    ComplementOf,
    IntersectionOf,
    NamedClass,
    named_classes,
    parse_class_expression,
)

logger = logging.getLogger(__name__)

THING = str(OWL.Thing)
NOTHING = str(OWL.Nothing)


class ReasonerError(Exception):
    """Raised when the reasoner is used incorrectly."""


class InconsistentOntologyError(Exception):
    """Raised when the ontology is globally inconsistent."""

    def __init__(self, ontology_iri: str, reason: str = ""):
        self.ontology_iri = ontology_iri
        self.reason = reason
        message = f"Ontology {ontology_iri} is inconsistent"
        super().__init__(f"{message}: {reason}" if reason else message)


@dataclass(frozen=True)
class ClassGroup:
    """A set of equivalent classes as computed by the reasoner."""
    members: FrozenSet[str]
    is_top: bool = False
    is_bottom: bool = False

    def members_minus_bottom(self) -> FrozenSet[str]:
        """Members that are not unsatisfiable; empty for the bottom group."""
        if self.is_bottom:
            return frozenset()
        return self.members - {NOTHING}


@runtime_checkable
class ReasonerAdapter(Protocol):
    """Classification results consumed by the graph mutation builder."""

    def classify(self) -> None:
        ...

    def is_consistent(self) -> bool:
        ...

    def is_satisfiable(self, class_uri: str) -> bool:
        ...

    def direct_superclass_groups(self, class_uri: str) -> Set[ClassGroup]:
        ...

    def equivalence_group(self, class_uri: str) -> ClassGroup:
        ...

    def subclass_axioms(self, class_uri: str) -> List[ClassExpression]:
        ...


class StructuralReasoner:
    """Told-axiom classification over an rdflib graph (see module docstring)."""

    def __init__(self, graph: Graph):
        self.graph = graph
        self._classified = False
        self._classes: Set[str] = set()
        self._told: Dict[str, Set[str]] = defaultdict(set)
        self._disjoint: Dict[str, Set[str]] = defaultdict(set)
        self._ancestors: Dict[str, FrozenSet[str]] = {}
        self._unsatisfiable: Set[str] = set()
        self._top: FrozenSet[str] = frozenset()
        self._consistent = True
        self._inconsistency_reason = ""

    # ------------------------------------------------------------------
    # Axiom collection
    # ------------------------------------------------------------------

    def _parse(self, node) -> ClassExpression:
        return parse_class_expression(self.graph, node)

    def _add_subsumption(self, sub: str, superclass: ClassExpression) -> None:
        if isinstance(superclass, NamedClass):
            self._told[sub].add(superclass.uri)
        elif isinstance(superclass, IntersectionOf):
            for operand in superclass.operands:
                self._add_subsumption(sub, operand)
        elif isinstance(superclass, ComplementOf) and isinstance(superclass.operand, NamedClass):
            self._add_disjoint(sub, superclass.operand.uri)

    def _add_disjoint(self, first: str, second: str) -> None:
        self._disjoint[first].add(second)
        self._disjoint[second].add(first)

    def _add_pairwise_disjoint(self, members: Iterable[str]) -> None:
        members = list(members)
        for i, first in enumerate(members):
            for second in members[i + 1:]:
                self._add_disjoint(first, second)

    def _named_list(self, head) -> List[str]:
        return [str(item) for item in Collection(self.graph, head) if isinstance(item, URIRef)]

    def _collect_axioms(self) -> None:
        graph = self.graph
        self._classes = {THING, NOTHING}

        for class_type in (OWL.Class, RDFS.Class):
            for subject in graph.subjects(RDF.type, class_type):
                if isinstance(subject, URIRef):
                    self._classes.add(str(subject))

        for subject, obj in graph.subject_objects(RDFS.subClassOf):
            sub_expr = self._parse(subject)
            super_expr = self._parse(obj)
            self._classes |= named_classes(sub_expr) | named_classes(super_expr)
            if isinstance(sub_expr, NamedClass):
                self._add_subsumption(sub_expr.uri, super_expr)

        for subject, obj in graph.subject_objects(OWL.equivalentClass):
            left = self._parse(subject)
            right = self._parse(obj)
            self._classes |= named_classes(left) | named_classes(right)
            if isinstance(left, NamedClass):
                self._add_subsumption(left.uri, right)
            if isinstance(right, NamedClass):
                self._add_subsumption(right.uri, left)

        for subject, obj in graph.subject_objects(OWL.disjointWith):
            if isinstance(subject, URIRef) and isinstance(obj, URIRef):
                self._classes |= {str(subject), str(obj)}
                self._add_disjoint(str(subject), str(obj))

        for axiom in graph.subjects(RDF.type, OWL.AllDisjointClasses):
            members = graph.value(axiom, OWL.members)
            if members is not None:
                self._add_pairwise_disjoint(self._named_list(members))

        for subject, members in graph.subject_objects(OWL.disjointUnionOf):
            if not isinstance(subject, URIRef):
                continue
            parts = self._named_list(members)
            self._classes |= set(parts) | {str(subject)}
            for part in parts:
                self._told[part].add(str(subject))
            self._add_pairwise_disjoint(parts)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _compute_ancestors(self, class_uri: str) -> FrozenSet[str]:
        seen = {class_uri}
        stack = [class_uri]
        while stack:
            current = stack.pop()
            for parent in self._told.get(current, ()):
                if parent not in seen:
                    seen.add(parent)
                    stack.append(parent)
        seen.add(THING)
        return frozenset(seen)

    def _ancestors_of(self, class_uri: str) -> FrozenSet[str]:
        if class_uri not in self._ancestors:
            self._ancestors[class_uri] = self._compute_ancestors(class_uri)
        return self._ancestors[class_uri]

    def _is_clash(self, ancestors: FrozenSet[str]) -> bool:
        if NOTHING in ancestors:
            return True
        return any(self._disjoint.get(cls, set()) & ancestors for cls in ancestors)

    def _check_consistency(self) -> None:
        if THING in self._unsatisfiable:
            self._consistent = False
            self._inconsistency_reason = "owl:Thing is unsatisfiable"
            return

        types: Dict[str, Set[str]] = defaultdict(set)
        for individual, cls in self.graph.subject_objects(RDF.type):
            if str(cls) in self._classes:
                types[str(individual)].add(str(cls))

        for individual, classes in sorted(types.items()):
            combined: Set[str] = set()
            for cls in classes:
                combined |= self._ancestors_of(cls)
            if self._is_clash(frozenset(combined)):
                self._consistent = False
                self._inconsistency_reason = f"individual {individual} has contradictory types"
                return

    def classify(self) -> None:
        """Compute subsumption, equivalence and satisfiability once."""
        if self._classified:
            return

        self._collect_axioms()
        for cls in self._classes:
            self._ancestors_of(cls)

        self._unsatisfiable = {
            cls for cls in self._classes if self._is_clash(self._ancestors_of(cls))
        }
        self._unsatisfiable.add(NOTHING)

        # Everything is below owl:Thing, so a class is equivalent to it
        # exactly when owl:Thing is told to be below that class.
        self._top = frozenset(self._ancestors_of(THING))

        self._check_consistency()
        self._classified = True

        logger.info(
            f"Classified {len(self._classes) - 2} classes: "
            f"{len(self._unsatisfiable) - 1} unsatisfiable, "
            f"{len(self._top) - 1} equivalent to owl:Thing"
        )

    def _require_classified(self) -> None:
        if not self._classified:
            raise ReasonerError("classify() must be called before querying the reasoner")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_consistent(self) -> bool:
        self._require_classified()
        return self._consistent

    @property
    def inconsistency_reason(self) -> str:
        return self._inconsistency_reason

    def is_satisfiable(self, class_uri: str) -> bool:
        self._require_classified()
        return class_uri not in self._unsatisfiable

    def _equivalents(self, class_uri: str) -> FrozenSet[str]:
        return frozenset(
            other for other in self._ancestors_of(class_uri)
            if class_uri in self._ancestors_of(other)
        )

    def _group(self, members: FrozenSet[str]) -> ClassGroup:
        return ClassGroup(
            members=members,
            is_top=bool(members & self._top),
            is_bottom=bool(members & self._unsatisfiable),
        )

    def equivalence_group(self, class_uri: str) -> ClassGroup:
        self._require_classified()
        if class_uri in self._unsatisfiable:
            return ClassGroup(frozenset(self._unsatisfiable), is_bottom=True)
        if class_uri in self._top:
            return ClassGroup(self._top, is_top=True)
        return self._group(self._equivalents(class_uri))

    def direct_superclass_groups(self, class_uri: str) -> Set[ClassGroup]:
        """
        Direct superclasses of a class, grouped by equivalence.

        A class without named superclasses gets the top group; owl:Thing and
        its equivalents have no superclasses.
        """
        self._require_classified()
        if class_uri in self._top:
            return set()

        ancestors = self._ancestors_of(class_uri)
        candidates = {
            cls for cls in ancestors
            if cls not in self._top and class_uri not in self._ancestors_of(cls)
        }
        direct = {
            cls for cls in candidates
            if not any(
                other != cls
                and cls in self._ancestors_of(other)
                and other not in self._ancestors_of(cls)
                for other in candidates
            )
        }

        if not direct:
            return {ClassGroup(self._top, is_top=True)}

        groups = set()
        for cls in direct:
            groups.add(self._group(self._equivalents(cls) & candidates))
        return groups

    def subclass_axioms(self, class_uri: str) -> List[ClassExpression]:
        """Superclass expressions of the told ``rdfs:subClassOf`` axioms of a class."""
        return [
            self._parse(obj)
            for obj in self.graph.objects(URIRef(class_uri), RDFS.subClassOf)
        ]
