"""urlvalue.mediatype
Media types, and parsing them out of data: URL content metadata (RFC 2397).
"""

import dataclasses
import logging
import re

from typing import Iterable, Self

from . import pctcode
from .grammar import TOKEN

logger = logging.getLogger(__name__)

_TOKEN_PAT: re.Pattern[str] = re.compile(TOKEN)

# RFC 2397 defines
#     mediatype  := [ type "/" subtype ] *( ";" parameter )
#     parameter  := attribute "=" value
# where type, subtype, attribute and value are RFC 2045 tokens "represented using URL escaped
# encoding of [RFC2396] as necessary", so percent-decoding happens after the "/" and ";"
# boundaries are found.
# Values may also be RFC 822 quoted-strings, which allow \-escapes, and a ";" inside a
# quoted-string belongs to the value. Quotes and backslashes may themselves be percent-encoded.

# quoted-string = <"> *( qtext / quoted-pair ) <">
_QUOTED_STRING: str = r'(?:"|%22)(?:[^\\"%]|\\.|%5c.|%(?!22|5c))*(?:"|%22)'

# A parameter body. ";base64" is the content-encoding marker, not a parameter.
_PARAMETER: str = rf'(?!base64(?:;|\Z))(?:[^;"%]|{_QUOTED_STRING}|%(?!22|5c))*'

_MEDIA_TYPE_PAT: re.Pattern[str] = re.compile(
    r"\A"
    r'(?P<type>[^/;"]+)'
    r"/"
    r'(?P<subtype>[^/;"]+)'
    rf"(?P<parameters>(?:;{_PARAMETER})*)"
    r"(?:;base64)?"
    r"\Z",
    re.DOTALL | re.IGNORECASE,
)

_PARAMETER_PAT: re.Pattern[str] = re.compile(rf";(?P<parameter>{_PARAMETER})", re.DOTALL | re.IGNORECASE)

_QUOTED_PAIR_PAT: re.Pattern[str] = re.compile(r"\\(.)", re.DOTALL)


@dataclasses.dataclass(frozen=True)
class MediaType:
    """A type/subtype pair with ordered parameters. Parameter keys may repeat.
    Build one with MediaType.create, which normalizes case. Invalid values raise ValueError.
    """

    type: str
    subtype: str
    parameters: tuple[tuple[str, str], ...] = ()

    def __post_init__(self: Self) -> None:
        for part in (self.type, self.subtype):
            if _TOKEN_PAT.fullmatch(part) is None:
                raise ValueError(f"invalid media type token {part!r}")
        if self.type == "*" and self.subtype != "*":
            raise ValueError("a wildcard type cannot have a specific subtype")
        for key, value in self.parameters:
            if _TOKEN_PAT.fullmatch(key) is None:
                raise ValueError(f"invalid parameter name {key!r}")
            if not value.isascii():
                raise ValueError(f"parameter values must be ASCII: {value!r}")

    @classmethod
    def create(cls, type_: str, subtype: str) -> Self:
        return cls(type=type_.lower(), subtype=subtype.lower())

    def with_parameters(self: Self, parameters: Iterable[tuple[str, str]]) -> Self:
        """Returns a copy whose parameters are exactly the given pairs, in order."""
        normalized: list[tuple[str, str]] = []
        for key, value in parameters:
            key = key.lower()
            if key == "charset":
                value = value.lower()
            normalized.append((key, value))
        return dataclasses.replace(self, parameters=tuple(normalized))

    def get_all(self: Self, key: str) -> tuple[str, ...]:
        key = key.lower()
        return tuple(v for k, v in self.parameters if k == key)

    @property
    def charset(self: Self) -> str | None:
        charsets: set[str] = set(self.get_all("charset"))
        if len(charsets) > 1:
            raise ValueError(f"conflicting charsets {sorted(charsets)}")
        return charsets.pop() if charsets else None

    def __str__(self: Self) -> str:
        result: str = f"{self.type}/{self.subtype}"
        for key, value in self.parameters:
            if _TOKEN_PAT.fullmatch(value) is None:
                value = '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
            result += f"; {key}={value}"
        return result


def _unquote_rfc822(token_or_quoted_string: str) -> str:
    """Strips the quotes from an RFC 822 quoted-string and undoes its \\-escapes.
    Anything else is returned unchanged.
    e.g. _unquote_rfc822('"a\\\\"b"') == 'a"b'
    """
    if len(token_or_quoted_string) >= 2 and token_or_quoted_string[0] == token_or_quoted_string[-1] == '"':
        return _QUOTED_PAIR_PAT.sub(r"\1", token_or_quoted_string[1:-1])
    return token_or_quoted_string


def parse_data_media_type(content_metadata: str) -> MediaType | None:
    """Parses the metadata of a data: URL, the part before the first ",".
    Returns None unless type, subtype and every parameter decode and form a valid media type.
    """
    m: re.Match[str] | None = _MEDIA_TYPE_PAT.match(content_metadata)
    if m is None:
        logger.debug("malformed data: URL metadata %r", content_metadata)
        return None
    type_: str | None = pctcode.decode(m["type"])
    subtype: str | None = pctcode.decode(m["subtype"])
    if type_ is None or subtype is None:
        logger.debug("undecodable media type in %r", content_metadata)
        return None
    try:
        media_type: MediaType = MediaType.create(type_, subtype)
    except ValueError as e:
        logger.debug("invalid media type in %r: %s", content_metadata, e)
        return None

    parameters: list[tuple[str, str]] = []
    for pm in _PARAMETER_PAT.finditer(m["parameters"]):
        parameter: str = pm["parameter"]
        if len(parameter) == 0:
            continue
        raw_key, eq, raw_value = parameter.partition("=")
        if len(eq) == 0:
            logger.debug("parameter %r in %r has no value", parameter, content_metadata)
            return None
        key: str | None = pctcode.decode(raw_key)
        value: str | None = pctcode.decode(raw_value)
        if key is None or value is None:
            logger.debug("undecodable parameter %r in %r", parameter, content_metadata)
            return None
        parameters.append((key, _unquote_rfc822(value)))
    if not parameters:
        return media_type
    try:
        return media_type.with_parameters(parameters)
    except ValueError as e:
        logger.debug("invalid parameters in %r: %s", content_metadata, e)
        return None
