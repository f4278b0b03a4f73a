import json
from typing import Any

from flask import request
from werkzeug import Response
from werkzeug.exceptions import HTTPException

PROBLEM_JSON = 'application/problem+json'


class ProblemDetailError(HTTPException):
    """Mix-in for Werkzeug HTTP exceptions reported to the client as an
    [RFC 9457](https://www.rfc-editor.org/rfc/rfc9457) problem detail.
    Combine it with one of the exceptions in `werkzeug.exceptions` (e.g.,
    `BadRequest`) to get the status code.

    Keyword arguments to the constructor fill in the `description` format
    string, and are added to the problem detail as extension members."""

    name: str
    """The problem detail `title`."""
    description: str
    """Format string for the problem detail `detail`."""

    def __init__(self, description=None, response=None, **params):
        super().__init__(description, response)
        self.params = params

    @property
    def detail(self) -> str:
        return self.description.format(**self.params)

    def as_problem_detail(self) -> dict[str, Any]:
        return {**problem_detail(self), **self.params}


def problem_detail(e: HTTPException) -> dict[str, Any]:
    return {
        'status': e.code,
        'title': e.name,
        'detail': e.detail if isinstance(e, ProblemDetailError) else e.description,
        # the fragment URL, including the pattern and page that failed
        'instance': request.url,
    }


def problem_detail_response(e: HTTPException) -> Response:
    """Error handler that replaces the body of an HTTP error response with a
    JSON problem detail. A 406 depends on the Accept header, so it says so
    in `Vary`."""
    response = e.get_response()
    if isinstance(e, ProblemDetailError):
        body = e.as_problem_detail()
    else:
        body = problem_detail(e)
    response.data = json.dumps(body)
    response.content_type = PROBLEM_JSON
    if e.code == 406:
        response.headers['Vary'] = 'Accept'
    return response
