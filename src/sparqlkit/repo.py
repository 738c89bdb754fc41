"""
Repo - a thin SPARQL protocol client over HTTP.

This module sends queries and updates to a SPARQL endpoint and hands the
response body to the decoder. It handles:
- Form-encoded POST requests as per the SPARQL 1.1 protocol, or any
  request a :class:`QueryProvider` builds
- SELECT/ASK (JSON results), CONSTRUCT (Turtle) and UPDATE requests
- Pluggable authentication, extra headers and timeouts
- Mapping HTTP failures to :class:`~sparqlkit.errors.EndpointError`

Authentication and caching are delegated to ``requests``: pass any
``requests`` auth object (see :func:`basic_auth` and :func:`digest_auth`),
or inject a preconfigured ``requests.Session`` (for example a caching one).

Usage:
    from sparqlkit.repo import Repo, basic_auth

    with Repo("https://query.wikidata.org/sparql", timeout=30) as repo:
        results = repo.query("SELECT ?s WHERE { ?s ?p ?o } LIMIT 10")
        for solution in results.solutions():
            print(solution["s"])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import requests
from rdflib import Graph
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth

from sparqlkit.config import DEFAULT_TIMEOUT, USER_AGENT
from sparqlkit.errors import EndpointError
from sparqlkit.results import ResultSet, parse_json

__all__ = [
    "GenericCall",
    "MimeTypes",
    "QueryProvider",
    "Repo",
    "basic_auth",
    "digest_auth",
    "sparql_select",
]

logger = logging.getLogger(__name__)


class MimeTypes:
    """Standard MIME types for SPARQL protocol."""

    JSON = "application/sparql-results+json"
    TURTLE = "text/turtle"
    FORM = "application/x-www-form-urlencoded"


def basic_auth(username: str, password: str) -> HTTPBasicAuth:
    """HTTP basic authentication for :class:`Repo`."""
    return HTTPBasicAuth(username, password)


def digest_auth(username: str, password: str) -> HTTPDigestAuth:
    """HTTP digest authentication for :class:`Repo`."""
    return HTTPDigestAuth(username, password)


def _form_request(endpoint_url: str, form: dict[str, str], accept: str | None) -> requests.Request:
    """Build a form-encoded SPARQL protocol POST."""
    headers = {
        "Content-Type": MimeTypes.FORM,
        "User-Agent": USER_AGENT,
    }
    if accept:
        headers["Accept"] = accept
    return requests.Request("POST", endpoint_url, data=form, headers=headers)


# ── Query providers ───────────────────────────────────────────────


@runtime_checkable
class QueryProvider(Protocol):
    """
    Anything that can build the HTTP request for a query.

    Implement this to send queries a plain string cannot express, for
    example a GET with extra URL parameters or a request to a different
    path on the same server.
    """

    def gen_request(self, endpoint_url: str) -> requests.Request: ...


@dataclass
class GenericCall:
    """
    The default provider: a query string sent as a form-encoded POST.

    Attributes:
        query: SPARQL query string
    """

    query: str

    def gen_request(self, endpoint_url: str) -> requests.Request:
        return _form_request(endpoint_url, {"query": self.query}, accept=MimeTypes.JSON)


class Repo:
    """
    An RDF repository queryable via the SPARQL protocol over HTTP.

    Attributes:
        endpoint_url: The SPARQL endpoint URL
        headers: Extra headers sent with every request
        timeout: Request timeout in seconds (None waits forever)

    Example:
        >>> repo = Repo("http://localhost:3030/ds/sparql", auth=basic_auth("admin", "pw"))
        >>> repo.ask("ASK { ?s ?p ?o }")
        True
    """

    # Maximum number of body characters kept in error messages
    ERROR_BODY_LIMIT = 500

    def __init__(
        self,
        endpoint_url: str,
        *,
        auth: AuthBase | tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the repository client.

        Args:
            endpoint_url: SPARQL endpoint URL
            auth: A ``requests`` auth object or ``(user, password)`` tuple
            headers: Extra headers for every request; they override the
                defaults set by each operation
            timeout: Request timeout in seconds
            session: Session to send requests with (default: a new one)
        """
        self.endpoint_url = endpoint_url
        self.headers = dict(headers or {})
        self.timeout = timeout

        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        if auth is not None:
            self._session.auth = auth

        logger.debug(f"Repo initialized for {self.endpoint_url}")

    def query(self, query: str | QueryProvider) -> ResultSet:
        """
        Execute a SELECT or ASK query and decode the JSON results.

        Args:
            query: SPARQL query string, or a :class:`QueryProvider` that
                builds the HTTP request itself

        Returns:
            The decoded :class:`~sparqlkit.results.ResultSet`

        Raises:
            EndpointError: If the endpoint does not answer 200 OK
            MalformedInputError: If the body is not SPARQL JSON results
        """
        return parse_json(self.query_raw(query))

    def query_raw(self, query: str | QueryProvider) -> bytes:
        """
        Execute a query and return the undecoded response body.

        Args:
            query: SPARQL query string, or a :class:`QueryProvider`

        Returns:
            The response body as bytes

        Raises:
            EndpointError: If the endpoint does not answer 200 OK
        """
        provider = GenericCall(query) if isinstance(query, str) else query
        request = provider.gen_request(self.endpoint_url)
        response = self._send(request, operation="Query", ok_statuses=(200,))
        return response.content

    def ask(self, query: str | QueryProvider) -> bool:
        """Execute an ASK query; a missing ``boolean`` field counts as False."""
        return bool(self.query(query).boolean)

    def construct(self, query: str) -> Graph:
        """
        Execute a CONSTRUCT query and return the triples as an RDFLib Graph.

        Args:
            query: SPARQL CONSTRUCT query string

        Returns:
            Graph parsed from the Turtle response

        Raises:
            EndpointError: If the endpoint does not answer 200 OK
        """
        request = _form_request(
            self.endpoint_url,
            {"query": query, "format": MimeTypes.TURTLE},
            accept=MimeTypes.TURTLE,
        )
        response = self._send(request, operation="Construct", ok_statuses=(200,))
        graph = Graph()
        if response.text.strip():
            graph.parse(data=response.text, format="turtle")
        return graph

    def update(self, update: str) -> None:
        """
        Execute a SPARQL update request.

        Args:
            update: SPARQL update string

        Raises:
            EndpointError: If the endpoint answers anything but 200 or 204
        """
        request = _form_request(self.endpoint_url, {"update": update}, accept=None)
        self._send(request, operation="Update", ok_statuses=(200, 204))

    def _send(
        self,
        request: requests.Request,
        operation: str,
        ok_statuses: tuple[int, ...],
    ) -> requests.Response:
        """
        Send a request through the session and check its status.

        The repo's extra headers are layered over the request's own, then the
        session prepares the request (adding its auth and default headers).

        Args:
            request: The unprepared request
            operation: Operation name used in log and error messages
            ok_statuses: Status codes treated as success

        Returns:
            The successful response

        Raises:
            EndpointError: On transport failures or unexpected status codes
        """
        request.headers = {**(request.headers or {}), **self.headers}

        logger.info(f"{operation} -> {request.method} {request.url}")

        try:
            prepared = self._session.prepare_request(request)
            response = self._session.send(prepared, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise EndpointError(f"{operation}: SPARQL request failed: {e}") from e

        if response.status_code not in ok_statuses:
            body = response.text.strip()[: self.ERROR_BODY_LIMIT]
            message = f"{operation}: SPARQL request failed: {response.status_code} {response.reason}."
            if body:
                message += f" Response body: \n{body}"
            logger.warning(message)
            raise EndpointError(message, status=response.status_code, body=body)

        return response

    def close(self) -> None:
        """Close the underlying requests session if this repo created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> Repo:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close session."""
        self.close()

    def __repr__(self) -> str:
        return f"Repo({self.endpoint_url!r}, timeout={self.timeout})"


# Convenience function for one-off queries
def sparql_select(endpoint_url: str, query: str, **options: Any) -> ResultSet:
    """
    Execute a one-off SELECT query.

    Convenience function when you don't need to reuse the repo.

    Args:
        endpoint_url: SPARQL endpoint URL
        query: SPARQL SELECT query
        **options: Keyword options for :class:`Repo`

    Returns:
        The decoded result set
    """
    with Repo(endpoint_url, **options) as repo:
        return repo.query(query)
