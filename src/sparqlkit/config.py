"""Runtime configuration loaded from environment variables.

The resolver needs exactly one setting, the ``strptime`` layout used for
``xsd:dateTime`` literals. It lives on :class:`ResolverConfig`, which can be
passed explicitly to :func:`sparqlkit.resolver.resolve` and to the result
views. Callers that pass nothing get :data:`default_config`, a single
process-wide instance.

Mutating :data:`default_config` (for example through :func:`set_date_format`)
affects every later resolution in the process that does not pass its own
config. Nothing here is locked: threads that resolve while another thread
changes the default must synchronise themselves, or pass their own
:class:`ResolverConfig` instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

__all__ = [
    "DEFAULT_TIMEOUT",
    "RFC3339",
    "RFC3339_FRACTIONAL",
    "USER_AGENT",
    "ResolverConfig",
    "default_config",
    "get_config",
    "set_date_format",
]

# Layouts use datetime.strptime directives
RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
RFC3339_FRACTIONAL = "%Y-%m-%dT%H:%M:%S.%f%z"

DATE_FORMAT_ENV = "SPARQLKIT_DATE_FORMAT"
TIMEOUT_ENV = "SPARQLKIT_TIMEOUT"

# Transport defaults
DEFAULT_TIMEOUT = float(os.getenv(TIMEOUT_ENV, "60"))
USER_AGENT = "sparqlkit/0.1 (SPARQL client)"


@dataclass
class ResolverConfig:
    """Settings consulted while turning bindings into terms.

    Attributes:
        date_format: ``strptime`` layout for ``xsd:dateTime`` values.
            The default, :data:`RFC3339`, also accepts a fractional second.
    """

    date_format: str = RFC3339

    @classmethod
    def from_env(cls) -> ResolverConfig:
        """Build a config, honouring ``SPARQLKIT_DATE_FORMAT`` if set."""
        return cls(date_format=os.getenv(DATE_FORMAT_ENV) or RFC3339)


# Process-wide default used when no config is passed
default_config = ResolverConfig.from_env()


def get_config(config: ResolverConfig | None = None) -> ResolverConfig:
    """Return *config*, or the process-wide default when it is ``None``."""
    return default_config if config is None else config


def set_date_format(layout: str) -> None:
    """Change the ``xsd:dateTime`` layout of the process-wide default.

    Terms resolved before the call keep their values; only later
    resolutions that rely on the default see the new layout.
    """
    default_config.date_format = layout
