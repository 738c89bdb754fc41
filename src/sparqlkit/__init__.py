"""sparqlkit: query SPARQL endpoints and decode their results into RDF terms.

Main modules:
- results: decoding of SPARQL JSON results and the bindings/solutions views
- resolver: conversion of single bindings into typed terms
- terms: the IRI, BlankNode, Literal and LangLiteral term types
- repo: thin HTTP client for SPARQL endpoints
- bank: named query templates loaded from a text file
"""

from .bank import Bank, load_bank
from .config import RFC3339, ResolverConfig, set_date_format
from .errors import (
    EndpointError,
    MalformedInputError,
    QueryNotFoundError,
    SparqlError,
    TemplateError,
    UnknownTermKindError,
)
from .repo import GenericCall, QueryProvider, Repo, basic_auth, digest_auth, sparql_select
from .resolver import BindingKind, resolve
from .results import Binding, ResultSet, as_bindings, as_solutions, parse_json
from .terms import IRI, BlankNode, LangLiteral, Literal, Term
from .version import VERSION

__all__ = [
    "IRI",
    "RFC3339",
    "VERSION",
    "Bank",
    "Binding",
    "BindingKind",
    "BlankNode",
    "EndpointError",
    "GenericCall",
    "LangLiteral",
    "Literal",
    "MalformedInputError",
    "QueryNotFoundError",
    "QueryProvider",
    "Repo",
    "ResolverConfig",
    "ResultSet",
    "SparqlError",
    "TemplateError",
    "Term",
    "UnknownTermKindError",
    "as_bindings",
    "as_solutions",
    "basic_auth",
    "digest_auth",
    "load_bank",
    "parse_json",
    "resolve",
    "set_date_format",
    "sparql_select",
]
