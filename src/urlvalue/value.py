"""urlvalue.value
A URL bundled with the context needed to analyze it part by part.
"""

import functools

from typing import Any, Self

from .absolutizer import Result
from .context import URLContext
from .mediatype import MediaType, parse_data_media_type
from .parts import PartRanges, Span
from .scheme import DATA, Scheme

_UNSET: Any = object()


class URLValue:
    """One piece of URL text, as interpreted in a URLContext.

    url_text is the absolute URL. ranges locates its parts, or is None if the URL could not be
    decomposed, in which case scheme is UNKNOWN and every part accessor gives None.

    Two URLValues are equal iff they were made from the same original text in the same context,
    whatever they resolve to.
    """

    @classmethod
    def of(cls, context: URLContext | str, original_url_text: str = _UNSET) -> Self:
        """URLValue.of(context, text), or URLValue.of(text) to use URLContext.DEFAULT."""
        if original_url_text is _UNSET:
            context, original_url_text = URLContext.DEFAULT, context
        if not isinstance(context, URLContext):
            raise TypeError(f"expected a URLContext, got {type(context).__name__}")
        if not isinstance(original_url_text, str):
            raise TypeError(f"expected URL text as str, got {type(original_url_text).__name__}")
        return cls(context, original_url_text)

    def __init__(self: Self, context: URLContext, original_url_text: str) -> None:
        self._context: URLContext = context
        self._original_url_text: str = original_url_text

        result: Result = context.absolutizer.absolutize(original_url_text)
        self._result: Result = result
        self._inherits_placeholder_authority: bool = (
            result.abs_url_ranges is not None
            and result.original_url_ranges.authority is None
            and result.abs_url_ranges.authority is not None
            and context.placeholder_authority is not None
            and result.abs_url_ranges.authority.slice(result.abs_url_text) == context.placeholder_authority
        )

    @property
    def context(self: Self) -> URLContext:
        return self._context

    @property
    def original_url_text(self: Self) -> str:
        return self._original_url_text

    @property
    def url_text(self: Self) -> str:
        return self._result.abs_url_text

    @property
    def scheme(self: Self) -> Scheme:
        return self._result.scheme

    @property
    def ranges(self: Self) -> PartRanges | None:
        return self._result.abs_url_ranges

    @property
    def inherits_placeholder_authority(self: Self) -> bool:
        """The original text had no authority, and the one it resolved to is the context's placeholder."""
        return self._inherits_placeholder_authority

    @property
    def path_simplification_reached_roots_parent(self: Self) -> bool:
        """Simplifying the path applied ".." with no segment left above it.

        Resolving "/../bar" against "http://example.com/foo/" spends the ".." on "foo", so this is
        False; "/../../bar" has nothing left for the second, so this is True. So does
        "http://example.com/../bar".
        """
        return self._result.path_simplification_reached_roots_parent

    def _part(self: Self, name: str) -> str | None:
        if self.ranges is None:
            return None
        span: Span | None = getattr(self.ranges, name)
        return span.slice(self.url_text) if span is not None else None

    @functools.cached_property
    def authority(self: Self) -> str | None:
        return self._part("authority")

    @functools.cached_property
    def path(self: Self) -> str | None:
        return self._part("path")

    @functools.cached_property
    def query(self: Self) -> str | None:
        """The query including its leading "?"."""
        return self._part("query")

    @functools.cached_property
    def fragment(self: Self) -> str | None:
        """The fragment including its leading "#"."""
        return self._part("fragment")

    @functools.cached_property
    def content_metadata(self: Self) -> str | None:
        """For data: URLs, everything between "data:" and the first ","."""
        return self._part("content_metadata")

    @functools.cached_property
    def content(self: Self) -> str | None:
        """For data: URLs, the still-encoded payload after the metadata's ","."""
        if self.ranges is None or self.ranges.content_metadata is None or self.ranges.path is None:
            return None
        return self.url_text[self.ranges.content_metadata.right + 1 : self.ranges.path.right]

    @functools.cached_property
    def content_media_type(self: Self) -> MediaType | None:
        """The media type declared in a data: URL's metadata."""
        if self.scheme is not DATA:
            return None
        metadata: str | None = self.content_metadata
        if metadata is None:
            return None
        return parse_data_media_type(metadata)

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, URLValue):
            return NotImplemented
        return self.original_url_text == other.original_url_text and self.context == other.context

    def __hash__(self: Self) -> int:
        return hash((self.original_url_text, self.context))

    def __str__(self: Self) -> str:
        return self.url_text

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({self.original_url_text!r}, url_text={self.url_text!r})"
