import gc
import logging
from pathlib import Path
from typing import Any, Iterator, Optional

import pyoxigraph
from rdflib import BNode, Literal, URIRef
from rdflib.term import Node

from ldfserver.datasources import TripleSource
from ldfserver.fragments import Triple
from ldfserver.namespaces import xsd

logger = logging.getLogger(__name__)

XSD_STRING = str(xsd.string)


def to_oxigraph(term: Node) -> Any:
    """Convert an rdflib term to the equivalent pyoxigraph term. Raises
    `ValueError` for IRIs or literals that pyoxigraph rejects."""
    if isinstance(term, URIRef):
        return pyoxigraph.NamedNode(str(term))
    if isinstance(term, BNode):
        return pyoxigraph.BlankNode(str(term))
    if isinstance(term, Literal):
        if term.language:
            return pyoxigraph.Literal(str(term), language=term.language)
        if term.datatype is not None:
            return pyoxigraph.Literal(str(term), datatype=pyoxigraph.NamedNode(str(term.datatype)))
        return pyoxigraph.Literal(str(term))
    raise ValueError(f'Cannot convert {term!r} to an Oxigraph term')


def from_oxigraph(term: Any) -> Node:
    """Convert a pyoxigraph term to the equivalent rdflib term."""
    if isinstance(term, pyoxigraph.NamedNode):
        return URIRef(term.value)
    if isinstance(term, pyoxigraph.BlankNode):
        return BNode(term.value)
    if isinstance(term, pyoxigraph.Literal):
        if term.language:
            return Literal(term.value, lang=term.language)
        if term.datatype is None or term.datatype.value == XSD_STRING:
            return Literal(term.value)
        return Literal(term.value, datatype=URIRef(term.datatype.value))
    raise ValueError(f'Unsupported Oxigraph term {term!r}')


class OxigraphSource(TripleSource):
    """Triple source backed by a persistent Oxigraph store, opened read-only.

    Matches come from the store's own indexes, so they are returned in index
    order, which does not change while the store is not written to."""

    def __init__(self, store: pyoxigraph.Store, graph: Optional[str] = None):
        self.store = store
        self.graph_name = pyoxigraph.NamedNode(graph) if graph else pyoxigraph.DefaultGraph()

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> 'OxigraphSource':
        try:
            location = Path(settings['location'])
        except KeyError:
            raise ValueError('Missing "location" setting')
        if not location.is_dir():
            raise FileNotFoundError(f'Oxigraph store directory {location} does not exist')
        logger.info(f'Opening Oxigraph store at {location}')
        return cls(pyoxigraph.Store.read_only(str(location)), graph=settings.get('graph'))

    def to_native(self, term: Node) -> Any:
        return to_oxigraph(term)

    def match(self, subject: Any = None, predicate: Any = None, obj: Any = None) -> Iterator[Triple]:
        if self.store is None:
            raise OSError('Oxigraph store is closed')
        for quad in self.store.quads_for_pattern(subject, predicate, obj, self.graph_name):
            yield from_oxigraph(quad.subject), from_oxigraph(quad.predicate), from_oxigraph(quad.object)

    def close(self):
        # pyoxigraph releases the underlying database when the Store is collected
        self.store = None
        gc.collect()
