from typing import Iterable

from rdflib import Graph, Literal, URIRef

from ldfserver.datasources import DataSource
from ldfserver.datasources.graph import STORE, GraphSource
from ldfserver.namespaces import dcterms, rdf, rdfs, void

INDEX_DESCRIPTION = 'List of all datasets'


def dataset_url(base_url: str, name: str) -> str:
    return base_url.rstrip('/') + '/' + name


def build_index_graph(base_url: str, datasources: Iterable[DataSource]) -> Graph:
    """Describe each data source with its type, label, title, and description."""
    graph = Graph(store=STORE)
    for datasource in datasources:
        uri = URIRef(dataset_url(base_url, datasource.name))
        graph.add((uri, rdf.type, void.Dataset))
        graph.add((uri, rdfs.label, Literal(datasource.title)))
        graph.add((uri, dcterms.title, Literal(datasource.title)))
        graph.add((uri, dcterms.description, Literal(datasource.description)))
    return graph


def create_index_datasource(base_url: str, datasources: Iterable[DataSource], title: str) -> DataSource:
    """The index is an ordinary data source whose store is a static graph."""
    return DataSource(
        name='',
        title=title,
        description=INDEX_DESCRIPTION,
        store=GraphSource(build_index_graph(base_url, datasources)),
    )
