import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from rdflib import Graph
from rdflib.util import guess_format

from ldfserver.datasources import TripleSource
from ldfserver.fragments import Triple

logger = logging.getLogger(__name__)

# dict-backed store; iterates in insertion order whatever the hash seed
STORE = 'SimpleMemory'


class GraphSource(TripleSource):
    """Triple source backed by an in-memory rdflib `Graph`.

    Graphs created here use the `SimpleMemory` store, which yields matches in
    the order the triples were added. Since the graph is not modified after
    loading, the same files give the same pages in every process. A graph
    passed in with another store is only stable within one process."""

    def __init__(self, graph: Optional[Graph] = None):
        self.graph = graph if graph is not None else Graph(store=STORE)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> 'GraphSource':
        """Load the files listed in `settings['file']` (a single path or a
        list of paths). The RDF syntax is taken from `settings['format']`, or
        guessed from each file extension."""
        files = settings.get('file')
        if not files:
            raise ValueError('Missing "file" setting')
        if isinstance(files, (str, Path)):
            files = [files]

        graph = Graph(store=STORE)
        for file in files:
            rdf_format = settings.get('format') or guess_format(str(file))
            logger.info(f'Loading {file} (format: {rdf_format or "unknown"})')
            graph.parse(file, format=rdf_format)
        logger.info(f'Loaded {len(graph)} triple(s)')
        return cls(graph)

    def match(self, subject: Any = None, predicate: Any = None, obj: Any = None) -> Iterator[Triple]:
        yield from self.graph.triples((subject, predicate, obj))

    def __len__(self):
        return len(self.graph)
