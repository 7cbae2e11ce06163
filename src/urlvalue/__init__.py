__version__ = "0.1"

from .absolutizer import Absolutizer, Result
from .context import PLACEHOLDER_AUTHORITY, URLContext
from .mediatype import MediaType, parse_data_media_type
from .parts import PartRanges, Span
from .scheme import ABOUT, BLOB, BUILTIN_SCHEMES, DATA, DEFAULT_SCHEMES, FILE, FTP, HTTP, HTTPS, JAVASCRIPT, MAILTO, TEL, UNKNOWN, WS, WSS, Authority, Scheme, SchemeRegistry
from .value import URLValue
