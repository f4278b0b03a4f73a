from rdflib import Literal, URIRef

from ldfserver.fragments import Constant, Fragment, FragmentRequest, Variable
from ldfserver.namespaces import dcterms, foaf, hydra, rdf, void, xsd

DATASET_URL = 'http://ldf.example.org/people'
ALICE = URIRef('http://example.org/alice')


def make_fragment(page: int = 1, is_last_page: bool = False, triples=None) -> Fragment:
    request = FragmentRequest(
        dataset_url=DATASET_URL,
        subject=Constant(ALICE),
        page=page,
        page_size=2,
        parameters={'subject': str(ALICE)},
    )
    if triples is None:
        triples = [(ALICE, rdf.type, foaf.Person), (ALICE, foaf.name, Literal('Alice'))]
    return Fragment(
        request=request,
        triples=triples,
        total_items=len(triples),
        is_last_page=is_last_page,
        title='People',
        description='A few people',
    )


def page_url(page: int) -> URIRef:
    suffix = f'&page={page}' if page > 1 else ''
    return URIRef(f'{DATASET_URL}?subject=http%3A%2F%2Fexample.org%2Falice{suffix}')


def test_pattern_element_str():
    assert str(Variable()) == '?'
    assert str(Variable('s')) == '?s'
    assert str(Constant(ALICE)) == '<http://example.org/alice>'


def test_metadata():
    fragment = make_fragment(page=2)
    graph = fragment.metadata_graph
    dataset = URIRef(DATASET_URL + '#dataset')

    assert (dataset, rdf.type, void.Dataset) in graph
    assert (dataset, rdf.type, hydra.Collection) in graph
    assert (dataset, dcterms.title, Literal('People')) in graph
    assert (dataset, dcterms.description, Literal('A few people')) in graph
    assert (dataset, void.subset, page_url(2)) in graph
    assert (page_url(2), hydra.totalItems, Literal(2, datatype=xsd.integer)) in graph
    assert (page_url(2), void.triples, Literal(2, datatype=xsd.integer)) in graph
    assert (page_url(2), hydra.itemsPerPage, Literal(2, datatype=xsd.integer)) in graph


def test_search_form():
    graph = make_fragment().controls_graph
    dataset = URIRef(DATASET_URL + '#dataset')

    search = graph.value(dataset, hydra.search)
    assert search is not None
    assert graph.value(search, hydra.template) == Literal(DATASET_URL + '{?subject,predicate,object}')
    mappings = {
        str(graph.value(mapping, hydra.variable)): graph.value(mapping, hydra.property)
        for mapping in graph.objects(search, hydra.mapping)
    }
    assert mappings == {'subject': rdf.subject, 'predicate': rdf.predicate, 'object': rdf.object}


def test_first_page_links():
    graph = make_fragment(page=1).controls_graph
    assert (page_url(1), hydra.first, page_url(1)) in graph
    assert (page_url(1), hydra.next, page_url(2)) in graph
    assert graph.value(page_url(1), hydra.previous) is None


def test_middle_page_links():
    graph = make_fragment(page=3).controls_graph
    assert (page_url(3), hydra.first, page_url(1)) in graph
    assert (page_url(3), hydra.previous, page_url(2)) in graph
    assert (page_url(3), hydra.next, page_url(4)) in graph


def test_last_page_has_no_next_link():
    fragment = make_fragment(page=2, is_last_page=True, triples=[])
    graph = fragment.controls_graph
    assert fragment.next_page_url is None
    assert graph.value(page_url(2), hydra.next) is None
    assert (page_url(2), hydra.previous, page_url(1)) in graph


def test_to_graph_is_union():
    fragment = make_fragment()
    graph = fragment.to_graph()
    assert (ALICE, foaf.name, Literal('Alice')) in graph
    assert len(graph) == len(fragment.metadata_graph) + len(fragment.triples_graph) + len(fragment.controls_graph)
