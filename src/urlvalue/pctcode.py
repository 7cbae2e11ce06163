"""urlvalue.pctcode
Percent-escape decoding that fails soft instead of guessing.
"""

import re

from urllib.parse import unquote_to_bytes

from .grammar import HEXDIG

# A "%" that does not start a pct-encoded triple.
_BAD_ESCAPE: re.Pattern[str] = re.compile(rf"%(?!{HEXDIG}{HEXDIG})")


def decode(text: str) -> str | None:
    """Decodes every %XX escape in text.
    Returns None if an escape is truncated or malformed, or if the decoded octets are not UTF-8.
    e.g. decode("a%2Fb") == "a/b", decode("%2") is None
    """
    if "%" not in text:
        return text
    if _BAD_ESCAPE.search(text) is not None:
        return None
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeError:
        return None


def encode(text: str) -> str:
    """Escapes every UTF-8 octet of text, including the unreserved ones.
    A lone surrogate is escaped as its 3 surrogate octets, which decode() rejects.
    """
    return "".join(f"%{octet:02X}" for octet in text.encode("utf-8", "surrogatepass"))
