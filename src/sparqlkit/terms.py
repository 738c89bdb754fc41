"""RDF term value types produced by the resolver.

A resolved cell is always one of four frozen dataclasses, exposed together
as the :data:`Term` union:

- :class:`IRI`
- :class:`BlankNode`
- :class:`Literal` (typed, carrying the coerced Python value)
- :class:`LangLiteral` (language-tagged string)

Terms render in N-Triples syntax with :func:`str` and convert to the
equivalent :mod:`rdflib` node with ``to_rdflib()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from rdflib import BNode, URIRef
from rdflib import Literal as RDFLiteral
from rdflib.namespace import RDF, XSD

__all__ = [
    "IRI",
    "RDF_LANG_STRING",
    "XSD_BOOLEAN",
    "XSD_DATETIME",
    "XSD_DOUBLE",
    "XSD_FLOAT",
    "XSD_INTEGER",
    "XSD_STRING",
    "BlankNode",
    "LangLiteral",
    "Literal",
    "Term",
]

XSD_STRING = str(XSD.string)
XSD_INTEGER = str(XSD.integer)
XSD_FLOAT = str(XSD.float)
XSD_DOUBLE = str(XSD.double)
XSD_BOOLEAN = str(XSD.boolean)
XSD_DATETIME = str(XSD.dateTime)
RDF_LANG_STRING = str(RDF.langString)

_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def _quote(text: str) -> str:
    return '"' + text.translate(_ESCAPES) + '"'


def _lexical_form(value: Any) -> str:
    """Canonical-ish lexical form for a coerced literal value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True, slots=True)
class IRI:
    """A resource named by an IRI. The IRI is not validated."""

    value: str

    def n3(self) -> str:
        return f"<{self.value}>"

    def to_rdflib(self) -> URIRef:
        return URIRef(self.value)

    def __str__(self) -> str:
        return self.n3()


@dataclass(frozen=True, slots=True)
class BlankNode:
    """A blank node, identified only by its endpoint-local label."""

    label: str

    def n3(self) -> str:
        return f"_:{self.label}"

    def to_rdflib(self) -> BNode:
        return BNode(self.label)

    def __str__(self) -> str:
        return self.n3()


@dataclass(frozen=True, slots=True)
class Literal:
    """A typed literal.

    ``value`` holds the coerced Python value (``str``, ``int``, ``float``,
    ``bool`` or ``datetime``) and ``datatype`` its XSD datatype IRI.
    ``lexical`` keeps the string the endpoint sent; it is derived from
    ``value`` when omitted and does not take part in equality.
    """

    value: Any
    datatype: str = XSD_STRING
    lexical: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.lexical is None:
            object.__setattr__(self, "lexical", _lexical_form(self.value))

    def n3(self) -> str:
        return f"{_quote(self.lexical)}^^<{self.datatype}>"

    def to_rdflib(self) -> RDFLiteral:
        return RDFLiteral(self.lexical, datatype=URIRef(self.datatype))

    def __str__(self) -> str:
        return self.n3()


@dataclass(frozen=True, slots=True)
class LangLiteral:
    """A language-tagged string literal."""

    value: str
    lang: str

    @property
    def datatype(self) -> str:
        return RDF_LANG_STRING

    def n3(self) -> str:
        return f"{_quote(self.value)}@{self.lang}"

    def to_rdflib(self) -> RDFLiteral:
        return RDFLiteral(self.value, lang=self.lang)

    def __str__(self) -> str:
        return self.n3()


Term = Union[IRI, BlankNode, Literal, LangLiteral]
