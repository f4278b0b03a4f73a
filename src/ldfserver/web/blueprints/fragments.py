import logging
from urllib.parse import urlencode

from flask import Blueprint, Response, current_app, make_response, render_template, request
from rdflib import Graph, URIRef
from rdflib.term import Node
from werkzeug.exceptions import BadRequest, InternalServerError, NotAcceptable

from ldfserver.context import ServerContext
from ldfserver.datasources import DataSourceNotFound
from ldfserver.fragments import Fragment, FragmentResolutionError, InvalidRequest
from ldfserver.fragments.resolver import resolve_fragment
from ldfserver.negotiation import HTML, NoAcceptableFormat, rdflib_format
from ldfserver.web.flask_problem import ProblemDetailError

logger = logging.getLogger(__name__)
blueprint = Blueprint('fragments', __name__)


@blueprint.route('/', defaults={'name': ''})
@blueprint.route('/<path:name>')
def fragment(name: str):
    ctx: ServerContext = current_app.config['CONTEXT']

    try:
        datasource = ctx.registry.resolve(name)
    except DataSourceNotFound as e:
        logger.warning(str(e))
        return Response(f'{e}\n', status=404, mimetype='text/plain')

    try:
        fragment_request = ctx.parser.parse(request.args, ctx.registry.url_for(datasource))
    except InvalidRequest as e:
        raise InvalidPatternParameter(parameter=e.parameter, value=e.value, reason=str(e))

    try:
        ldf = resolve_fragment(datasource, fragment_request)
    except FragmentResolutionError as e:
        raise InternalServerError('Unable to retrieve the requested fragment') from e

    try:
        mime_type = ctx.negotiator.best_match(request.headers.get('Accept'))
    except NoAcceptableFormat as e:
        raise NoAcceptableRepresentation(accept=e.accept or '', available=list(ctx.negotiator.mime_types))

    if mime_type == HTML:
        body = render_template(
            'fragment.html',
            ctx=ctx,
            datasource=datasource,
            fragment=ldf,
            fragment_request=fragment_request,
            datasources=list(ctx.registry.datasources.values()),
            search_url=search_url,
            nsm=ctx.new_namespace_manager(),
        )
    else:
        body = serialize(ldf, mime_type, ctx)

    response = make_response(body)
    response.headers['Content-Type'] = f'{mime_type}; charset=utf-8'
    response.headers['Vary'] = 'Accept'
    return response


def serialize(ldf: Fragment, mime_type: str, ctx: ServerContext) -> str:
    """Serialize the union of the triples, metadata, and controls of the
    fragment, using the configured namespace prefixes."""
    graph = Graph()
    for prefix, namespace in ctx.namespace_manager.namespaces():
        graph.bind(prefix, namespace, override=True)
    ldf.to_graph(graph)
    try:
        return graph.serialize(format=rdflib_format(mime_type))
    except Exception as e:
        logger.error(f'Unable to serialize {ldf.request.current_page_url} as {mime_type}: {e}')
        raise InternalServerError('Unable to serialize the requested fragment') from e


def search_url(dataset_url: str, position: str, term: Node) -> str:
    """Link to the fragment of the dataset where `position` is `term`."""
    if isinstance(term, URIRef) and term.startswith(('http://', 'https://')):
        value = str(term)
    else:
        value = term.n3()
    return dataset_url + '?' + urlencode({position: value})


class InvalidPatternParameter(ProblemDetailError, BadRequest):
    name = 'Invalid triple pattern fragment request'
    description = 'Invalid "{parameter}" parameter: {reason}'


class NoAcceptableRepresentation(ProblemDetailError, NotAcceptable):
    name = 'No acceptable representation'
    description = 'No representation matches the Accept header "{accept}"'
