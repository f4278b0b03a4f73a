"""Triple pattern fragment requests and the fragments that answer them."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlencode

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node

from ldfserver.namespaces import dcterms, hydra, rdf, void, xsd

Triple = tuple[Node, Node, Node]

PATTERN_PARAMETERS = ('subject', 'predicate', 'object')


class InvalidRequest(Exception):
    """A query parameter could not be turned into a fragment request."""
    def __init__(self, parameter: str, value: Any, *args):
        super().__init__(*args)
        self.parameter = parameter
        self.value = value


class FragmentResolutionError(Exception):
    pass


@dataclass(frozen=True)
class Variable:
    """An unbound pattern position. Unnamed for an omitted parameter."""
    name: Optional[str] = None

    is_variable = True

    def __str__(self):
        return f'?{self.name}' if self.name else '?'


@dataclass(frozen=True)
class Constant:
    """A pattern position bound to a single RDF term."""
    term: Node

    is_variable = False

    def __str__(self):
        return self.term.n3()


PatternElement = Union[Variable, Constant]


@dataclass
class FragmentRequest:
    """A request for one page of the triples matching a pattern in a dataset."""
    dataset_url: str
    subject: PatternElement = field(default_factory=Variable)
    predicate: PatternElement = field(default_factory=Variable)
    object: PatternElement = field(default_factory=Variable)
    page: int = 1
    page_size: int = 100
    parameters: Mapping[str, str] = field(default_factory=dict)
    """Raw, non-empty pattern query parameters, used to build page links."""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def pattern(self) -> tuple[PatternElement, PatternElement, PatternElement]:
        return self.subject, self.predicate, self.object

    @property
    def fragment_url(self) -> str:
        """URL of the fragment (all pages); the first page shares this URL."""
        return self._url(self.parameters)

    def page_url(self, page: int) -> str:
        params = dict(self.parameters)
        if page > 1:
            params['page'] = str(page)
        return self._url(params)

    @property
    def current_page_url(self) -> str:
        return self.page_url(self.page)

    def _url(self, params: Mapping[str, str]) -> str:
        if not params:
            return self.dataset_url
        return self.dataset_url + '?' + urlencode(params)


@dataclass
class Fragment:
    """One page of a triple pattern fragment, together with the information
    needed to describe it as a hypermedia resource."""
    request: FragmentRequest
    triples: list[Triple]
    total_items: int
    is_last_page: bool
    title: str = ''
    description: str = ''

    @property
    def dataset_id(self) -> URIRef:
        return URIRef(self.request.dataset_url + '#dataset')

    @property
    def page_id(self) -> URIRef:
        return URIRef(self.request.current_page_url)

    @property
    def previous_page_url(self) -> Optional[str]:
        if self.request.page > 1:
            return self.request.page_url(self.request.page - 1)
        return None

    @property
    def next_page_url(self) -> Optional[str]:
        if not self.is_last_page:
            return self.request.page_url(self.request.page + 1)
        return None

    @property
    def triples_graph(self) -> Graph:
        graph = Graph()
        for triple in self.triples:
            graph.add(triple)
        return graph

    @property
    def metadata_graph(self) -> Graph:
        """Dataset description and the pagination counts of this page."""
        graph = Graph()
        dataset = self.dataset_id
        fragment = URIRef(self.request.fragment_url)
        page = self.page_id

        graph.add((dataset, rdf.type, void.Dataset))
        graph.add((dataset, rdf.type, hydra.Collection))
        if self.title:
            graph.add((dataset, dcterms.title, Literal(self.title)))
        if self.description:
            graph.add((dataset, dcterms.description, Literal(self.description)))
        graph.add((dataset, void.subset, page))
        if page != fragment:
            graph.add((dataset, void.subset, fragment))

        count = Literal(self.total_items, datatype=xsd.integer)
        graph.add((page, rdf.type, hydra.PartialCollectionView))
        graph.add((page, void.triples, count))
        graph.add((page, hydra.totalItems, count))
        graph.add((page, hydra.itemsPerPage, Literal(self.request.page_size, datatype=xsd.integer)))
        return graph

    @property
    def controls_graph(self) -> Graph:
        """Hypermedia controls: the dataset search form and page links."""
        graph = Graph()
        dataset = self.dataset_id
        page = self.page_id

        search = BNode()
        graph.add((dataset, hydra.search, search))
        graph.add((search, hydra.template, Literal(self.request.dataset_url + '{?subject,predicate,object}')))
        graph.add((search, hydra.variableRepresentation, hydra.ExplicitRepresentation))
        for name, prop in zip(PATTERN_PARAMETERS, (rdf.subject, rdf.predicate, rdf.object)):
            mapping = BNode()
            graph.add((search, hydra.mapping, mapping))
            graph.add((mapping, hydra.variable, Literal(name)))
            graph.add((mapping, hydra.property, prop))

        graph.add((page, hydra.first, URIRef(self.request.page_url(1))))
        if self.previous_page_url is not None:
            graph.add((page, hydra.previous, URIRef(self.previous_page_url)))
        if self.next_page_url is not None:
            graph.add((page, hydra.next, URIRef(self.next_page_url)))
        return graph

    def to_graph(self, graph: Optional[Graph] = None) -> Graph:
        """Union of the triples, metadata, and controls graphs, added to
        `graph` (or a new graph) and returned."""
        if graph is None:
            graph = Graph()
        for part in (self.metadata_graph, self.triples_graph, self.controls_graph):
            for triple in part:
                graph.add(triple)
        return graph
