"""Decoding of ``application/sparql-results+json`` documents.

:func:`parse_json` turns one results document into an immutable
:class:`ResultSet` made of pydantic models that mirror the wire format.
Decoding is purely structural: unknown fields are ignored, missing sections
default to empty, and rows are never checked against ``head.vars``.

Two read-only views resolve the raw bindings into typed terms:

* :func:`as_bindings` — variable → terms, in row order.
* :func:`as_solutions` — one variable → term mapping per row.

Cells whose ``type`` tag is unknown are dropped from both views.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import IO, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from sparqlkit.config import ResolverConfig, get_config
from sparqlkit.errors import MalformedInputError, UnknownTermKindError
from sparqlkit.resolver import resolve
from sparqlkit.terms import Term

__all__ = [
    "Binding",
    "Head",
    "ResultSet",
    "Results",
    "Row",
    "as_bindings",
    "as_solutions",
    "parse_json",
]

logger = logging.getLogger(__name__)

_WIRE_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# ── Wire models ───────────────────────────────────────────────────


class Binding(BaseModel):
    """One cell of a result row, exactly as the endpoint sent it."""

    model_config = _WIRE_CONFIG

    type: str = ""  # "uri" | "bnode" | "literal" | "typed-literal"
    value: str = ""
    lang: str | None = Field(default=None, alias="xml:lang")
    datatype: str | None = None

    @model_validator(mode="before")
    @classmethod
    def null_cell(cls, data: Any) -> Any:
        # A null cell decodes as an empty binding, which no kind matches
        return {} if data is None else data

    @field_validator("type", "value", mode="before")
    @classmethod
    def null_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v


# Read-only once decoded
Row = Mapping[str, Binding]


class Head(BaseModel):
    """Result header: declared variables and optional links."""

    model_config = _WIRE_CONFIG

    vars: tuple[str, ...] = ()
    link: tuple[str, ...] = ()

    @field_validator("vars", "link", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return () if v is None else v


class Results(BaseModel):
    """The ``results`` block holding the solution rows."""

    model_config = _WIRE_CONFIG

    distinct: bool = False
    ordered: bool = False
    bindings: tuple[Row, ...] = ()

    @field_validator("bindings", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("bindings")
    @classmethod
    def freeze_rows(cls, v: tuple[Row, ...]) -> tuple[Row, ...]:
        return tuple(MappingProxyType(dict(row)) for row in v)


class ResultSet(BaseModel):
    """A decoded SPARQL JSON results document.

    Instances are frozen; a new query produces a new result set. The
    ``boolean`` field is populated for ASK responses and ignored by the
    views.
    """

    model_config = _WIRE_CONFIG

    head: Head = Field(default_factory=Head)
    results: Results = Field(default_factory=Results)
    boolean: bool | None = None

    @property
    def vars(self) -> list[str]:
        """Declared variable names, in header order."""
        return list(self.head.vars)

    @property
    def rows(self) -> tuple[Row, ...]:
        """Raw solution rows, in document order."""
        return self.results.bindings

    def bindings(self, config: ResolverConfig | None = None) -> dict[str, list[Term]]:
        """Shortcut for :func:`as_bindings`."""
        return as_bindings(self, config)

    def solutions(self, config: ResolverConfig | None = None) -> list[dict[str, Term]]:
        """Shortcut for :func:`as_solutions`."""
        return as_solutions(self, config)


# ── Decoder ───────────────────────────────────────────────────────


def parse_json(source: bytes | str | IO[Any]) -> ResultSet:
    """Decode a SPARQL JSON results document.

    Parameters
    ----------
    source:
        The document as ``bytes``, ``str`` or a readable (binary or text)
        stream such as an HTTP response body.

    Returns
    -------
    ResultSet
        The decoded, immutable result set.

    Raises
    ------
    MalformedInputError
        If the input is not JSON or does not fit the results shape. The
        underlying parse error is chained as ``__cause__``.
    """
    data = source.read() if hasattr(source, "read") else source

    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise MalformedInputError(f"Invalid SPARQL JSON results: {e}") from e

    try:
        result_set = ResultSet.model_validate(raw)
    except ValidationError as e:
        raise MalformedInputError(f"Unexpected SPARQL JSON results structure: {e}") from e

    logger.debug(
        f"Decoded result set: {len(result_set.head.vars)} vars, {len(result_set.rows)} rows"
    )
    return result_set


# ── Views ─────────────────────────────────────────────────────────


def _resolve_cell(row: Row, var: str, config: ResolverConfig) -> Term | None:
    """Resolve ``row[var]``, or return ``None`` if unbound or unresolvable."""
    binding = row.get(var)
    if binding is None:
        return None
    try:
        return resolve(binding, config)
    except UnknownTermKindError as e:
        logger.debug(f"Dropping ?{var}: {e}")
        return None


def as_bindings(
    result_set: ResultSet,
    config: ResolverConfig | None = None,
) -> dict[str, list[Term]]:
    """Map each declared variable to its resolved terms, in row order.

    Rows where a variable is unbound, or where its binding cannot be
    resolved, contribute nothing, so a variable's list may be shorter than
    the number of rows. Variables with no resolvable value get no key.
    """
    config = get_config(config)
    bound: dict[str, list[Term]] = {}
    for var in result_set.head.vars:
        for row in result_set.rows:
            term = _resolve_cell(row, var, config)
            if term is not None:
                bound.setdefault(var, []).append(term)
    return bound


def as_solutions(
    result_set: ResultSet,
    config: ResolverConfig | None = None,
) -> list[dict[str, Term]]:
    """Return one variable → term mapping per row, in row order.

    A row's mapping holds only the cells that are bound and resolvable;
    nothing is inserted for the others.
    """
    config = get_config(config)
    solutions: list[dict[str, Term]] = []
    for row in result_set.rows:
        solution: dict[str, Term] = {}
        for var in row:
            term = _resolve_cell(row, var, config)
            if term is not None:
                solution[var] = term
        solutions.append(solution)
    return solutions
