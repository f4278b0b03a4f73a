"""Resolution of triple pattern fragment requests against a data source.

The match is bounded: at most `offset + limit` matches are read from the
store. Because nothing past the end of the page is read, a page that is
exactly filled is never reported as the last page, even when there are no
further matches. Clients find out on the following (empty) page.

A variable that appears in more than one position of a pattern (for example,
`?x foaf:knows ?x`) does not constrain those positions to be equal. Each
position is matched independently, so the page may contain triples whose
subject and object differ.
"""

import logging
from itertools import islice

from ldfserver.datasources import DataSource
from ldfserver.fragments import Fragment, FragmentRequest, FragmentResolutionError

logger = logging.getLogger(__name__)


def resolve_fragment(datasource: DataSource, request: FragmentRequest) -> Fragment:
    store = datasource.store
    try:
        subject, predicate, obj = (
            None if element.is_variable else store.to_native(element.term)
            for element in request.pattern
        )
        matches = store.match_page(subject, predicate, obj, offset=request.offset, limit=request.limit)
        # never trust a store to honor the limit
        triples = list(islice(matches, request.limit))
    except (OSError, ValueError) as e:
        logger.error(f'Unable to resolve fragment {request.current_page_url}: {e}')
        raise FragmentResolutionError(str(e)) from e

    is_last_page = len(triples) < request.limit
    logger.debug(
        f'Resolved {request.current_page_url}: {len(triples)} triple(s), '
        f'{"last page" if is_last_page else "more pages may follow"}'
    )
    return Fragment(
        request=request,
        triples=triples,
        total_items=len(triples),
        is_last_page=is_last_page,
        title=datasource.title,
        description=datasource.description,
    )
