import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import islice
from typing import Any, Iterable, Iterator, Optional, Type

from importlib_metadata import entry_points
from rdflib.term import Node

from ldfserver.fragments import Triple

PLUGIN_GROUP = 'ldfserver.datasource_types'
DATASOURCE_TYPES = entry_points(group=PLUGIN_GROUP)

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    pass


class DataSourceInitError(DataSourceError):
    def __init__(self, name: str, *args):
        super().__init__(*args)
        self.name = name

    def __str__(self):
        return f'Unable to initialize data source "{self.name}": {super().__str__()}'


class DataSourceNotFound(DataSourceError):
    def __init__(self, name: str, *args):
        super().__init__(*args)
        self.name = name

    def __str__(self):
        return f'No data source found with name "{self.name}"'


class TripleSource(ABC):
    """Capability interface of a backing triple store.

    Implementations must yield the matches of a given pattern in the same
    order every time the pattern is matched against unchanged data, and must
    be safe to read from several request threads at once."""

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> 'TripleSource':
        """Create a store from the `settings` of a data source configuration
        entry. Any exception raised here is reported as a failure to
        initialize that data source."""
        raise NotImplementedError

    def to_native(self, term: Node) -> Any:
        """Translate an rdflib term into the term type the store expects."""
        return term

    @abstractmethod
    def match(self, subject: Any = None, predicate: Any = None, obj: Any = None) -> Iterator[Triple]:
        """Yield every rdflib triple matching the given native terms, where
        `None` is a wildcard for that position."""

    def match_page(
            self,
            subject: Any = None,
            predicate: Any = None,
            obj: Any = None,
            offset: int = 0,
            limit: Optional[int] = None,
    ) -> Iterable[Triple]:
        """Return the matches from `offset`, at most `limit` of them.

        This default skips by scanning `match()`. Stores that can seek
        natively may override it, but must return exactly the same triples."""
        stop = None if limit is None else offset + limit
        return islice(self.match(subject, predicate, obj), offset, stop)

    def close(self):
        pass


@dataclass
class DataSource:
    name: str
    title: str
    description: str
    store: TripleSource

    def close(self):
        self.store.close()


def get_datasource_type(type_name: str) -> Type[TripleSource]:
    try:
        return DATASOURCE_TYPES[type_name].load()
    except KeyError as e:
        raise DataSourceError(f'Unknown data source type "{type_name}"') from e
