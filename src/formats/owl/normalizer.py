"""
URI to ontology ID normalization.

Derives the compact identifier (``GO:0008150``, ``PIZZA:Margherita``) that is
stored as the ``name`` of every class node and used as the relationship type
of existential restriction edges.

The rules follow the OBO Foundry ID policy for ``_`` separated IDs
(http://www.obofoundry.org/id-policy.shtml) and use the ontology acronym as
ID space for ``#`` fragments that live in the ontology's own namespace.
"""

from typing import Optional


def extract_uri(text: str) -> str:
    """Strip the angle brackets of a rendered IRI such as ``<http://x.org/A>``."""
    opening = text.find("<")
    closing = text.rfind(">")
    if opening >= 0 and closing > opening:
        return text[opening + 1:closing]
    return text


def normalize_id(uri: str, ontology_acronym: str, ontology_namespace: Optional[str]) -> str:
    """
    Derive the compact ontology ID of a URI.

    Args:
        uri: Full class or property URI
        ontology_acronym: Acronym used as ID space for the ontology's own terms
        ontology_namespace: Ontology IRI; ``#`` fragments under it get the acronym

    Returns:
        ``ID_SPACE:local`` when an ID space could be determined, otherwise the
        bare local fragment.

    Examples:
        >>> normalize_id("http://x.org/a/b#Foo", "test", "http://x.org/a/b")
        'TEST:Foo'
        >>> normalize_id("http://purl.obolibrary.org/obo/GO_0008150", "GO", None)
        'GO:0008150'
        >>> normalize_id("http://x.org/a/b", "TEST", None)
        'b'
    """
    id_space = ""
    candidate = uri

    # Only look at the last path segment so slashes inside fragments cannot
    # produce an ID space.
    if "/" in candidate:
        last_slash = candidate.rfind("/")
        tail = candidate[last_slash:]
        if len(tail) == 1:
            # Trailing slash: back up one segment.
            head = candidate[:last_slash]
            last_slash = head.rfind("/")
            tail = head[last_slash:] if last_slash >= 0 else head
        if len(tail) > 1:
            candidate = tail[1:]

    hash_pos = candidate.find("#")
    if hash_pos >= 0 and hash_pos + 1 != len(candidate):
        candidate = candidate[hash_pos + 1:]
        namespace = uri[:uri.find("#")]
        if ontology_namespace is not None and namespace == ontology_namespace:
            id_space = ontology_acronym

    underscore_pos = candidate.find("_")
    if underscore_pos >= 0 and underscore_pos + 1 != len(candidate):
        if not id_space:
            id_space = candidate[:underscore_pos]
        candidate = candidate[underscore_pos + 1:]

    if id_space:
        return f"{id_space.upper()}:{candidate}"
    return candidate
