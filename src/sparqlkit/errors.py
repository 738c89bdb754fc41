"""Exception hierarchy for :mod:`sparqlkit`.

Only two conditions ever reach callers of the decoding core:

* :class:`MalformedInputError` when a results document cannot be decoded.
* :class:`UnknownTermKindError` when a single binding carries a ``type``
  tag outside ``uri``/``bnode``/``literal``/``typed-literal``.

Datatype coercion failures are deliberately *not* represented here; the
resolver falls back to an ``xsd:string`` literal instead.
"""

from __future__ import annotations


class SparqlError(Exception):
    """Base exception for sparqlkit errors."""

    pass


class MalformedInputError(SparqlError):
    """Raised when a SPARQL JSON results document cannot be decoded."""

    pass


class UnknownTermKindError(SparqlError):
    """Raised when a binding's ``type`` is not a known RDF term kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"unknown term type: {kind!r}")


class EndpointError(SparqlError):
    """Raised when the endpoint answers with an error or cannot be reached."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(message)


class QueryNotFoundError(SparqlError, KeyError):
    """Raised when a query bank has no query under the requested tag."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"no query with key {key!r}")

    def __str__(self) -> str:
        return self.args[0]


class TemplateError(SparqlError):
    """Raised when a query template references a field the data lacks."""

    pass
