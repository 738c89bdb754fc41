"""Term resolution: one SPARQL JSON binding in, one typed RDF term out.

Dispatch is on the binding's ``type`` tag, which must be one of the four
:class:`BindingKind` values; anything else raises
:class:`~sparqlkit.errors.UnknownTermKindError`.

``typed-literal`` values with a recognised XSD datatype are coerced to the
matching Python type. When coercion fails the cell is *not* reported as an
error: it silently becomes an ``xsd:string`` literal holding the original
text. Endpoints routinely emit loosely typed literals and downstream code
relies on one bad cell never sinking a whole result set, so this leniency
is kept on purpose. Unrecognised datatype IRIs are collapsed to
``xsd:string`` the same way.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sparqlkit.config import RFC3339, RFC3339_FRACTIONAL, ResolverConfig, get_config
from sparqlkit.errors import UnknownTermKindError
from sparqlkit.terms import (
    XSD_BOOLEAN,
    XSD_DATETIME,
    XSD_DOUBLE,
    XSD_FLOAT,
    XSD_INTEGER,
    XSD_STRING,
    IRI,
    BlankNode,
    LangLiteral,
    Literal,
    Term,
)

if TYPE_CHECKING:
    from sparqlkit.results import Binding

__all__ = [
    "BindingKind",
    "resolve",
]

logger = logging.getLogger(__name__)


class BindingKind(str, Enum):
    """The ``type`` tags a SPARQL JSON binding may carry."""

    URI = "uri"
    BNODE = "bnode"
    LITERAL = "literal"
    TYPED_LITERAL = "typed-literal"


# ── Datatype coercion ────────────────────────────────────────────

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


def _to_string(value: str, config: ResolverConfig) -> str:
    return value


def _to_integer(value: str, config: ResolverConfig) -> int:
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"invalid integer literal: {value!r}")
    return int(value)


def _to_float(value: str, config: ResolverConfig) -> float:
    # float() tolerates padding and digit separators, XSD does not
    if value != value.strip() or "_" in value:
        raise ValueError(f"invalid floating point literal: {value!r}")
    return float(value)


def _to_boolean(value: str, config: ResolverConfig) -> bool:
    try:
        return _BOOLEANS[value]
    except KeyError:
        raise ValueError(f"invalid boolean literal: {value!r}") from None


def _to_datetime(value: str, config: ResolverConfig) -> datetime:
    layout = config.date_format
    try:
        return datetime.strptime(value, layout)
    except ValueError:
        # RFC 3339 permits an optional fractional second
        if layout != RFC3339:
            raise
    return datetime.strptime(value, RFC3339_FRACTIONAL)


_COERCERS: dict[str, Callable[[str, ResolverConfig], Any]] = {
    XSD_STRING: _to_string,
    XSD_INTEGER: _to_integer,
    XSD_FLOAT: _to_float,
    XSD_DOUBLE: _to_float,
    XSD_BOOLEAN: _to_boolean,
    XSD_DATETIME: _to_datetime,
}


# ── Per-kind resolution ──────────────────────────────────────────


def _resolve_bnode(binding: Binding, config: ResolverConfig) -> Term:
    return BlankNode(binding.value)


def _resolve_uri(binding: Binding, config: ResolverConfig) -> Term:
    return IRI(binding.value)


def _resolve_literal(binding: Binding, config: ResolverConfig) -> Term:
    if binding.lang:
        return LangLiteral(binding.value, binding.lang)
    # Untyped literals are typed as xsd:string
    return Literal(binding.value, XSD_STRING)


def _resolve_typed_literal(binding: Binding, config: ResolverConfig) -> Term:
    if binding.lang:
        return LangLiteral(binding.value, binding.lang)

    datatype = binding.datatype or ""
    coerce = _COERCERS.get(datatype)
    if coerce is None:
        logger.debug(f"Unrecognised datatype {datatype!r}, treating {binding.value!r} as xsd:string")
        return Literal(binding.value, XSD_STRING)

    try:
        value = coerce(binding.value, config)
    except ValueError as e:
        logger.debug(f"Falling back to xsd:string: {e}")
        return Literal(binding.value, XSD_STRING)

    return Literal(value, datatype, lexical=binding.value)


_RESOLVERS: dict[BindingKind, Callable[[Binding, ResolverConfig], Term]] = {
    BindingKind.BNODE: _resolve_bnode,
    BindingKind.URI: _resolve_uri,
    BindingKind.LITERAL: _resolve_literal,
    BindingKind.TYPED_LITERAL: _resolve_typed_literal,
}


def resolve(binding: Binding, config: ResolverConfig | None = None) -> Term:
    """Convert a single result binding into an RDF term.

    Args:
        binding: One decoded cell of a result row.
        config: Resolver settings; the process-wide
            :data:`~sparqlkit.config.default_config` when omitted.

    Returns:
        An :class:`~sparqlkit.terms.IRI`, :class:`~sparqlkit.terms.BlankNode`,
        :class:`~sparqlkit.terms.Literal` or :class:`~sparqlkit.terms.LangLiteral`.

    Raises:
        UnknownTermKindError: If ``binding.type`` is not a known kind. This is
            the only error; datatype coercion failures yield ``xsd:string``.
    """
    try:
        kind = BindingKind(binding.type)
    except ValueError:
        raise UnknownTermKindError(binding.type) from None
    return _RESOLVERS[kind](binding, get_config(config))
