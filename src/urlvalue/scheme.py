"""urlvalue.scheme
Schemes known to the absolutizer, and how each one decomposes.
"""

import dataclasses
import enum
import logging
import types

from typing import Iterable, Iterator, Mapping, Self

logger = logging.getLogger(__name__)


class Authority(enum.Enum):
    """Whether a scheme's URLs carry an authority component."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


@dataclasses.dataclass(frozen=True)
class Scheme:
    """Resolution metadata for one scheme. Compare schemes by identity against the module constants."""

    name: str
    hierarchical: bool
    authority: Authority
    default_port: int | None = None
    has_query: bool = True
    has_fragment: bool = True

    @property
    def is_unknown(self: Self) -> bool:
        return self is UNKNOWN

    def __str__(self: Self) -> str:
        return self.name


# Stands in for any scheme that is not registered, and for URLs whose scheme cannot be determined.
# It is never hierarchical so nothing is decomposed under it.
UNKNOWN: Scheme = Scheme(name="", hierarchical=False, authority=Authority.FORBIDDEN)

HTTP: Scheme = Scheme("http", True, Authority.REQUIRED, default_port=80)
HTTPS: Scheme = Scheme("https", True, Authority.REQUIRED, default_port=443)
WS: Scheme = Scheme("ws", True, Authority.REQUIRED, default_port=80)
WSS: Scheme = Scheme("wss", True, Authority.REQUIRED, default_port=443)
FTP: Scheme = Scheme("ftp", True, Authority.REQUIRED, default_port=21)
FILE: Scheme = Scheme("file", True, Authority.OPTIONAL)
ABOUT: Scheme = Scheme("about", False, Authority.FORBIDDEN)
BLOB: Scheme = Scheme("blob", False, Authority.FORBIDDEN)
# data:[<mediatype>][;base64],<data>
# "?" belongs to the content, so only the fragment is split off.
DATA: Scheme = Scheme("data", False, Authority.FORBIDDEN, has_query=False)
# The whole remainder is script source.
JAVASCRIPT: Scheme = Scheme("javascript", False, Authority.FORBIDDEN, has_query=False, has_fragment=False)
MAILTO: Scheme = Scheme("mailto", False, Authority.FORBIDDEN)
TEL: Scheme = Scheme("tel", False, Authority.FORBIDDEN)

BUILTIN_SCHEMES: tuple[Scheme, ...] = (HTTP, HTTPS, WS, WSS, FTP, FILE, ABOUT, BLOB, DATA, JAVASCRIPT, MAILTO, TEL)


class SchemeRegistry:
    """A fixed set of schemes keyed by lower-case name.

    A registry never changes once built, so contexts sharing one always resolve alike.
    with_schemes builds a larger registry.
    """

    def __init__(self: Self, schemes: Iterable[Scheme] = ()) -> None:
        by_name: dict[str, Scheme] = {}
        for scheme in schemes:
            if scheme is UNKNOWN or not scheme.name:
                raise ValueError("cannot register a scheme without a name")
            key: str = scheme.name.lower()
            if key in by_name:
                raise ValueError(f"scheme {key!r} is already registered")
            by_name[key] = scheme
        self._schemes: Mapping[str, Scheme] = types.MappingProxyType(by_name)

    def with_schemes(self: Self, *schemes: Scheme) -> "SchemeRegistry":
        """A new registry holding this one's schemes followed by the given ones."""
        return SchemeRegistry([*self._schemes.values(), *schemes])

    def lookup(self: Self, name: str) -> Scheme:
        """Case-insensitive lookup. Unregistered names give UNKNOWN."""
        scheme: Scheme | None = self._schemes.get(name.lower())
        if scheme is None:
            logger.debug("unregistered scheme %r", name)
            return UNKNOWN
        return scheme

    def __contains__(self: Self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._schemes

    def __iter__(self: Self) -> Iterator[Scheme]:
        return iter(self._schemes.values())

    def __len__(self: Self) -> int:
        return len(self._schemes)


DEFAULT_SCHEMES: SchemeRegistry = SchemeRegistry(BUILTIN_SCHEMES)
