"""Query bank: named SPARQL queries kept together in one text file.

Each query is introduced by a tag comment and runs until the next tag::

    # tag: byName
    SELECT ?s WHERE {
      ?s rdfs:label '{{ .Name }}'@en .
    }

Other ``#`` comment lines are dropped, every query is flattened onto a
single line, and :meth:`Bank.prepare` fills ``{{ .Field }}`` placeholders
from a mapping or an object's attributes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import IO, Any

from sparqlkit.errors import QueryNotFoundError, TemplateError

__all__ = [
    "Bank",
    "load_bank",
]

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"^#\s*tag:\s+([\w-]+)\s*$")
PLACEHOLDER_RE = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")
SPACE_RE = re.compile(r"\s{2,}")


def _strip_line(line: str) -> str:
    """Collapse runs of whitespace into a single space."""
    return SPACE_RE.sub(" ", line)


def _lookup(data: Any, name: str) -> Any:
    if isinstance(data, Mapping):
        if name in data:
            return data[name]
    elif hasattr(data, name):
        return getattr(data, name)
    raise TemplateError(f"template field {name!r} not provided")


class Bank(dict[str, str]):
    """A mapping of tag → flattened SPARQL query."""

    @classmethod
    def load(cls, path: str | Path) -> Bank:
        """Read a bank from a UTF-8 text file."""
        with open(path, encoding="utf-8") as f:
            return load_bank(f)

    def prepare(self, key: str, data: Any = None) -> str:
        """
        Return the query stored under *key*, with placeholders filled in.

        Args:
            key: The tag of the query
            data: Optional mapping or object whose items/attributes replace
                ``{{ .Name }}`` placeholders. Without it the query is
                returned untouched.

        Returns:
            The query string

        Raises:
            QueryNotFoundError: If no query has this tag
            TemplateError: If a placeholder names a field *data* lacks
        """
        if key not in self:
            raise QueryNotFoundError(key)

        query = self[key]
        if data is None:
            return query
        return PLACEHOLDER_RE.sub(lambda m: str(_lookup(data, m.group(1))), query)


def load_bank(source: str | IO[str] | Iterable[str]) -> Bank:
    """Parse tagged queries from text.

    Parameters
    ----------
    source:
        The bank contents as a string, or any iterable of lines such as an
        open text file.

    Returns
    -------
    Bank
        Tag → query. Lines before the first tag are ignored; a tag that
        appears again later replaces the earlier query; tags without a
        body are not stored.
    """
    lines = source.splitlines() if isinstance(source, str) else source

    chunks: dict[str, list[str]] = {}
    key: str | None = None
    for line in lines:
        line = line.rstrip("\r\n")
        match = TAG_RE.match(line)
        if match:
            if match.group(1) != key:
                key = match.group(1)
                chunks[key] = []
            continue
        if key is None or line.startswith("#"):
            continue
        chunks[key].append(line)

    bank = Bank()
    for tag, body in chunks.items():
        if body:
            # Lines end in a space so joined lines stay separated
            bank[tag] = _strip_line("".join(f"{line} " for line in body))
    logger.debug(f"Loaded {len(bank)} queries: {', '.join(sorted(bank))}")
    return bank
