import logging
from typing import Iterable, Optional

from werkzeug.datastructures import MIMEAccept
from werkzeug.http import parse_accept_header

logger = logging.getLogger(__name__)

HTML = 'text/html'

RDF_FORMATS = {
    'text/turtle': 'turtle',
    'application/ld+json': 'json-ld',
    'application/n-triples': 'nt',
    'application/rdf+xml': 'xml',
    'text/n3': 'n3',
}
"""Mapping of the supported RDF media types to rdflib serializer names."""

DEFAULT_FORMATS = ('text/turtle', 'application/ld+json', 'application/n-triples', 'application/rdf+xml')


class NoAcceptableFormat(Exception):
    def __init__(self, accept: Optional[str], *args):
        super().__init__(*args)
        self.accept = accept

    def __str__(self):
        return f'None of the available formats match "{self.accept}"'


class ContentNegotiator:
    """Selects a response media type from an Accept header.

    Media types are considered in the order they are registered. The best
    match has the highest quality value in the Accept header; between equal
    qualities, a specific media range (`text/turtle`) beats a partial wildcard
    (`text/*`), which beats `*/*`. Remaining ties go to the media type that
    was registered first."""

    def __init__(self, mime_types: Iterable[str] = ()):
        self._mime_types: list[str] = []
        for mime_type in mime_types:
            self.register(mime_type)

    @classmethod
    def from_formats(cls, formats: Iterable[str] = DEFAULT_FORMATS) -> 'ContentNegotiator':
        """HTML first, then each of the given RDF `formats`. Raises
        `ValueError` for a media type with no rdflib serializer."""
        unsupported = [f for f in formats if f not in RDF_FORMATS]
        if unsupported:
            raise ValueError(f'Unsupported RDF format(s): {", ".join(unsupported)}')
        return cls([HTML, *formats])

    @property
    def mime_types(self) -> tuple[str, ...]:
        return tuple(self._mime_types)

    def register(self, mime_type: str):
        mime_type = mime_type.strip().lower()
        if mime_type not in self._mime_types:
            self._mime_types.append(mime_type)

    def best_match(self, accept: Optional[str]) -> str:
        """Raises `NoAcceptableFormat` if no registered type is acceptable.
        A missing or blank Accept header accepts anything."""
        if not self._mime_types:
            raise NoAcceptableFormat(accept, 'No media types are registered')
        header = accept if accept and accept.strip() else '*/*'
        match = parse_accept_header(header, MIMEAccept).best_match(self._mime_types)
        if match is None:
            raise NoAcceptableFormat(accept)
        logger.debug(f'Negotiated {match} for Accept: {header}')
        return match


def rdflib_format(mime_type: str) -> str:
    return RDF_FORMATS[mime_type]
