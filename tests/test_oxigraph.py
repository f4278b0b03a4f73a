import gc

import pyoxigraph
import pytest
from rdflib import BNode, Literal, URIRef

from ldfserver.datasources import DataSource
from ldfserver.datasources.oxigraph import OxigraphSource, from_oxigraph, to_oxigraph
from ldfserver.fragments import Constant, FragmentRequest, FragmentResolutionError, Variable
from ldfserver.fragments.resolver import resolve_fragment
from ldfserver.namespaces import foaf, rdf, xsd

EX = 'http://example.org/'
GRAPH = 'http://example.org/graph'


@pytest.fixture
def store_location(tmp_path):
    location = tmp_path / 'store'
    store = pyoxigraph.Store(str(location))
    person = pyoxigraph.NamedNode(str(foaf.Person))
    for n in range(10):
        subject = pyoxigraph.NamedNode(f'{EX}person/{n}')
        store.add(pyoxigraph.Quad(subject, pyoxigraph.NamedNode(str(rdf.type)), person))
        store.add(pyoxigraph.Quad(subject, pyoxigraph.NamedNode(str(foaf.name)), pyoxigraph.Literal(f'Person {n}')))
    store.add(pyoxigraph.Quad(
        pyoxigraph.NamedNode(f'{EX}person/0'),
        pyoxigraph.NamedNode(str(foaf.name)),
        pyoxigraph.Literal('Personne zéro', language='fr'),
        pyoxigraph.NamedNode(GRAPH),
    ))
    store.flush()
    del store
    gc.collect()
    return location


@pytest.fixture
def source(store_location):
    source = OxigraphSource.from_settings({'location': str(store_location)})
    yield source
    source.close()


@pytest.mark.parametrize(
    'term',
    [
        URIRef(f'{EX}alice'),
        Literal('Alice'),
        Literal('Alice', lang='en'),
        Literal('42', datatype=xsd.integer),
    ]
)
def test_term_conversion(term):
    assert from_oxigraph(to_oxigraph(term)) == term


def test_blank_node_conversion():
    assert isinstance(from_oxigraph(to_oxigraph(BNode('b0'))), BNode)


def test_invalid_iri():
    with pytest.raises(ValueError):
        to_oxigraph(URIRef('not an iri'))


def test_missing_location():
    with pytest.raises(ValueError):
        OxigraphSource.from_settings({})


def test_nonexistent_location(tmp_path):
    with pytest.raises(FileNotFoundError):
        OxigraphSource.from_settings({'location': str(tmp_path / 'nope')})


def test_match_default_graph(source):
    assert len(list(source.match())) == 20
    names = list(source.match(None, source.to_native(foaf.name), None))
    assert len(names) == 10
    assert all(isinstance(o, Literal) for _, _, o in names)


def test_match_named_graph(store_location):
    source = OxigraphSource.from_settings({'location': str(store_location), 'graph': GRAPH})
    assert list(source.match()) == [
        (URIRef(f'{EX}person/0'), foaf.name, Literal('Personne zéro', lang='fr')),
    ]
    source.close()


def test_match_order_is_stable(source):
    assert list(source.match()) == list(source.match())


def test_resolve_fragment(source):
    datasource = DataSource('people', 'People', '', source)
    request = FragmentRequest(
        dataset_url='http://ldf.example.org/people',
        subject=Variable('s'),
        predicate=Constant(rdf.type),
        object=Constant(foaf.Person),
        page=2,
        page_size=4,
    )
    fragment = resolve_fragment(datasource, request)
    assert len(fragment.triples) == 4
    assert not fragment.is_last_page
    all_types = list(source.match(None, source.to_native(rdf.type), source.to_native(foaf.Person)))
    assert fragment.triples == all_types[4:8]


def test_untranslatable_term(source):
    datasource = DataSource('people', 'People', '', source)
    request = FragmentRequest(dataset_url='http://ldf.example.org/people', subject=Constant(URIRef('not an iri')))
    with pytest.raises(FragmentResolutionError):
        resolve_fragment(datasource, request)


def test_closed_store(source):
    source.close()
    with pytest.raises(OSError):
        list(source.match())
