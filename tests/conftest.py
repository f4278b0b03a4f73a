import pytest
from rdflib import Graph, Literal, URIRef

from ldfserver.datasources import DataSource
from ldfserver.datasources.graph import STORE, GraphSource
from ldfserver.namespaces import foaf, rdf
from ldfserver.web import create_app


@pytest.fixture
def config_file_path(shared_datadir, monkeypatch):
    monkeypatch.setenv('DATA_DIR', str(shared_datadir))
    return shared_datadir / 'config.yml'


@pytest.fixture
def app(config_file_path):
    app = create_app(config_file_path)
    yield app
    app.config['CONTEXT'].registry.close()


@pytest.fixture
def app_client(app):
    return app.test_client()


def people(count: int) -> Graph:
    """A graph with `count` people, each with a type and a name."""
    graph = Graph(store=STORE)
    for n in range(count):
        person = URIRef(f'http://example.org/person/{n}')
        graph.add((person, rdf.type, foaf.Person))
        graph.add((person, foaf.name, Literal(f'Person {n}')))
    return graph


@pytest.fixture
def people_datasource():
    def _people_datasource(count: int, name: str = 'people') -> DataSource:
        return DataSource(
            name=name,
            title='People',
            description=f'{count} people',
            store=GraphSource(people(count)),
        )

    return _people_datasource


@pytest.fixture
def small_pages_client(shared_datadir, monkeypatch):
    """Client for a server with 3 triples per page."""
    monkeypatch.setenv('DATA_DIR', str(shared_datadir))
    app = create_app(shared_datadir / 'config-small-pages.yml')
    yield app.test_client()
    app.config['CONTEXT'].registry.close()
