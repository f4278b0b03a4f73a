import logging
import re
import sys
from typing import Mapping

from rdflib import Literal, URIRef
from rdflib.namespace import NamespaceManager
from rdflib.term import Node
from rdflib.util import from_n3

from ldfserver.fragments import Constant, FragmentRequest, InvalidRequest, PatternElement, Variable
from ldfserver.namespaces import namespace_manager

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100

VARIABLE_NAME = re.compile(r'^[A-Za-z0-9_]*$')
LITERAL = re.compile(r'^"(?:[^"\\]|\\.)*"(?:@[A-Za-z]+(?:-[A-Za-z0-9]+)*|\^\^\S+)?$', re.DOTALL)
ILLEGAL_IRI_CHARS = re.compile(r'[\x00-\x20<>"{}|\\^`]')
SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:')


def check_iri(iri: str) -> URIRef:
    if not SCHEME.match(iri) or ILLEGAL_IRI_CHARS.search(iri):
        raise ValueError(f'"{iri}" is not a valid absolute IRI')
    return URIRef(iri)


def parse_term(value: str, nsm: NamespaceManager = namespace_manager) -> Node:
    """Parse an IRI (`<...>`, `http(s)://...`, or `prefix:local` with a known
    prefix) or a literal (`"lexical"`, optionally followed by `@lang` or
    `^^datatype`).

    Raises `ValueError` if the value is neither."""
    if value.startswith('"'):
        if not LITERAL.match(value):
            raise ValueError(f'{value} is not a well-formed literal')
        try:
            term = from_n3(value, nsm=nsm)
        except KeyError as e:
            raise ValueError(f'Unknown prefix {e} in datatype of {value}') from e
        if term.datatype is not None:
            check_iri(str(term.datatype))
        return term
    if value.startswith('<'):
        if not value.endswith('>'):
            raise ValueError(f'{value} is missing its closing ">"')
        return check_iri(value[1:-1])
    if value.startswith('http://') or value.startswith('https://'):
        return check_iri(value)
    if ':' in value:
        prefix, local = value.split(':', 1)
        namespaces = dict(nsm.namespaces())
        if prefix not in namespaces:
            # other IRI schemes must be written as <scheme:...>
            raise ValueError(f'Unknown prefix "{prefix}"')
        return check_iri(str(namespaces[prefix]) + local)
    raise ValueError(f'"{value}" is not an IRI, literal, or variable')


def parse_pattern_element(value: str, nsm: NamespaceManager = namespace_manager) -> PatternElement:
    """A missing or empty value, `?name`, or a blank node label `_:label`
    is a variable; anything else must parse as a term."""
    if not value:
        return Variable()
    if value.startswith('?'):
        name = value[1:]
        if not VARIABLE_NAME.match(name):
            raise ValueError(f'"{value}" is not a valid variable name')
        return Variable(name)
    if value.startswith('_:'):
        return Variable(value)
    return Constant(parse_term(value, nsm))


class FragmentRequestParser:
    """Turns the query parameters of an HTTP request into a `FragmentRequest`.

    The page size is the same for every data source, and is set once when
    the parser is created."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, nsm: NamespaceManager = namespace_manager):
        if page_size < 1:
            raise ValueError(f'Page size must be a positive integer, not {page_size}')
        self.page_size = page_size
        self.nsm = nsm

    def parse(self, args: Mapping[str, str], dataset_url: str) -> FragmentRequest:
        elements = {}
        for position in ('subject', 'predicate', 'object'):
            value = (args.get(position) or '').strip()
            try:
                element = parse_pattern_element(value, self.nsm)
            except ValueError as e:
                raise InvalidRequest(position, value, str(e)) from e
            if position != 'object' and not element.is_variable and isinstance(element.term, Literal):
                raise InvalidRequest(position, value, f'A literal cannot be used as the {position}')
            elements[position] = element

        page_value = args.get('page') or '1'
        try:
            page = int(page_value)
        except ValueError as e:
            raise InvalidRequest('page', page_value, f'"{page_value}" is not an integer') from e
        if page < 1:
            raise InvalidRequest('page', page_value, 'Page numbers start at 1')
        if page * self.page_size > sys.maxsize:
            raise InvalidRequest('page', page_value, f'Page {page} is past the end of any data source')

        request = FragmentRequest(
            dataset_url=dataset_url,
            subject=elements['subject'],
            predicate=elements['predicate'],
            object=elements['object'],
            page=page,
            page_size=self.page_size,
            parameters={k: args[k] for k in ('subject', 'predicate', 'object') if args.get(k)},
        )
        logger.debug(
            f'Parsed request for {dataset_url}: '
            f'{request.subject} {request.predicate} {request.object} (page {page})'
        )
        return request
