"""urlvalue.absolutizer
Resolves URL references against a base per RFC 3986 section 5, and records where each component ends up.
"""

import dataclasses
import logging
import re

from typing import Self

from .grammar import ASCII_TAB_OR_NEWLINE, C0_CONTROL_OR_SPACE, SCHEME
from .parts import PartRanges, Span
from .scheme import DATA, UNKNOWN, Authority, Scheme, SchemeRegistry

logger = logging.getLogger(__name__)

_SCHEME_PREFIX_PAT: re.Pattern[str] = re.compile(rf"{SCHEME}:")
_TAB_OR_NEWLINE_PAT: re.Pattern[str] = re.compile(ASCII_TAB_OR_NEWLINE)
_EDGE_CONTROLS_PAT: re.Pattern[str] = re.compile(rf"\A{C0_CONTROL_OR_SPACE}+|{C0_CONTROL_OR_SPACE}+\Z")
_AUTHORITY_END_PAT: re.Pattern[str] = re.compile(r"[/?#]")

# Splits text whose scheme is not known, so the original ranges can still be reported.
_GENERIC: Scheme = Scheme(name="", hierarchical=True, authority=Authority.OPTIONAL)

# Dot segments, including their percent-encoded spellings.
_SINGLE_DOT: frozenset[str] = frozenset((".", "%2e"))
_DOUBLE_DOT: frozenset[str] = frozenset(("..", ".%2e", "%2e.", "%2e%2e"))


@dataclasses.dataclass(frozen=True)
class Result:
    """The outcome of absolutizing one piece of URL text.

    abs_url_ranges is None when the URL could not be decomposed, in which case scheme is UNKNOWN.
    original_url_ranges locates components in the original text (after tab and newline removal)
    and is always present.
    """

    scheme: Scheme
    abs_url_text: str
    abs_url_ranges: PartRanges | None
    original_url_ranges: PartRanges
    path_simplification_reached_roots_parent: bool


@dataclasses.dataclass
class _Reference:
    """A URL reference split into its raw components. Query and fragment exclude their delimiters."""

    scheme: Scheme
    authority: str | None
    path: str
    query: str | None
    fragment: str | None

    def serialize(self: Self) -> tuple[str, PartRanges]:
        """RFC 3986 section 5.3, noting the offsets of each component as it is written."""
        result: str = f"{self.scheme.name}:"
        authority: Span | None = None
        if self.authority is not None:
            result += "//"
            authority = Span(len(result), len(result) + len(self.authority))
            result += self.authority
        path: Span = Span(len(result), len(result) + len(self.path))
        result += self.path
        query: Span | None = None
        if self.query is not None:
            query = Span(len(result), len(result) + 1 + len(self.query))
            result += f"?{self.query}"
        fragment: Span | None = None
        if self.fragment is not None:
            fragment = Span(len(result), len(result) + 1 + len(self.fragment))
            result += f"#{self.fragment}"
        content_metadata: Span | None = None
        if self.scheme is DATA:
            comma: int = self.path.find(",")
            if comma >= 0:
                content_metadata = Span(path.left, path.left + comma)
        return result, PartRanges(
            authority=authority,
            path=path,
            query=query,
            fragment=fragment,
            content_metadata=content_metadata,
        )


def _clean(text: str) -> str:
    """Drops tabs and newlines anywhere, and controls or spaces at either end, as browsers do."""
    return _EDGE_CONTROLS_PAT.sub("", _TAB_OR_NEWLINE_PAT.sub("", text))


def _split(text: str, start: int, scheme: Scheme) -> tuple[_Reference, PartRanges]:
    """Splits text[start:] into components the way scheme decomposes them.
    Offsets in the returned ranges are relative to the whole of text.
    """
    end: int = len(text)

    fragment: str | None = None
    fragment_span: Span | None = None
    if scheme.has_fragment:
        hash_mark: int = text.find("#", start)
        if hash_mark >= 0:
            fragment = text[hash_mark + 1 :]
            fragment_span = Span(hash_mark, end)
            end = hash_mark

    query: str | None = None
    query_span: Span | None = None
    if scheme.has_query:
        question_mark: int = text.find("?", start, end)
        if question_mark >= 0:
            query = text[question_mark + 1 : end]
            query_span = Span(question_mark, end)
            end = question_mark

    authority: str | None = None
    authority_span: Span | None = None
    if scheme.hierarchical and text.startswith("//", start):
        m: re.Match[str] | None = _AUTHORITY_END_PAT.search(text, start + 2, end)
        authority_end: int = m.start() if m is not None else end
        authority = text[start + 2 : authority_end]
        authority_span = Span(start + 2, authority_end)
        start = authority_end

    return (
        _Reference(scheme=scheme, authority=authority, path=text[start:end], query=query, fragment=fragment),
        PartRanges(authority=authority_span, path=Span(start, end), query=query_span, fragment=fragment_span),
    )


def _remove_dot_segments(path: str, parents: int = 0) -> tuple[str, bool]:
    """The "remove_dot_segments" routine from RFC 3986 section 5.2.4, done in one pass over the segments.

    Also reports whether a ".." reached the root's parent, i.e. found no segment left to remove.
    parents is how many directories sit above path. A ".." with nothing to pop climbs out of one of
    those before it reaches the root's parent.
    e.g. _remove_dot_segments("/foo/../../bar") == ("/bar", True)
         _remove_dot_segments("/../bar", parents=1) == ("/bar", False)
         _remove_dot_segments("a/..") == ("/", False)
    """
    absolute: bool = path.startswith("/")
    segments: list[str] = path.split("/")
    if absolute:
        segments = segments[1:]
    output: list[str] = []
    reached_roots_parent: bool = False
    for i, segment in enumerate(segments):
        is_last: bool = i == len(segments) - 1
        folded: str = segment.lower()
        if folded in _SINGLE_DOT:
            if is_last:
                output.append("")
        elif folded in _DOUBLE_DOT:
            if output:
                output.pop()
                # Removing the first segment of a rootless path leaves its "/" behind.
                absolute = absolute or not output
            elif parents > 0:
                parents -= 1
            else:
                reached_roots_parent = True
            if is_last:
                output.append("")
        else:
            output.append(segment)
    result: str = "/".join(output)
    return (f"/{result}" if absolute else result), reached_roots_parent


def _directory_depth(path: str) -> int:
    """How many directories the last segment of path sits in, not counting the root."""
    return path.count("/") - int(path.startswith("/"))


def _merge_paths(base: _Reference, r: _Reference) -> str:
    """The "merge" routine from RFC 3986 section 5.2.3."""
    if base.authority is not None and len(base.path) == 0:
        return f"/{r.path}"
    dirname, slash, _ = base.path.rpartition("/")
    return dirname + slash + r.path


class Absolutizer:
    """Turns URL text into absolute URL text relative to a fixed base.

    schemes decides which schemes are recognized.
    base_url, if given, supplies the components a relative reference leaves out.
    placeholder_authority, if given, is substituted when a scheme needs an authority and none can be found.
    """

    def __init__(
        self: Self,
        schemes: SchemeRegistry,
        base_url: str | None = None,
        placeholder_authority: str | None = None,
    ) -> None:
        self.schemes: SchemeRegistry = schemes
        self.placeholder_authority: str | None = placeholder_authority
        self._base: _Reference | None = None
        if base_url is not None:
            base, _, _ = self._resolve(_clean(base_url), None)
            if base is None:
                logger.warning("base URL %r cannot be decomposed; resolving without a base", base_url)
            self._base = base

    def absolutize(self: Self, original_url_text: str) -> Result:
        """Resolves original_url_text against the base. Never raises for str input."""
        text: str = _clean(original_url_text)
        target, original_ranges, reached_roots_parent = self._resolve(text, self._base)
        if target is None:
            return Result(
                scheme=UNKNOWN,
                abs_url_text=text,
                abs_url_ranges=None,
                original_url_ranges=original_ranges,
                path_simplification_reached_roots_parent=reached_roots_parent,
            )
        abs_url_text, abs_url_ranges = target.serialize()
        if reached_roots_parent:
            logger.debug("path of %r reached the root's parent", original_url_text)
        return Result(
            scheme=target.scheme,
            abs_url_text=abs_url_text,
            abs_url_ranges=abs_url_ranges,
            original_url_ranges=original_ranges,
            path_simplification_reached_roots_parent=reached_roots_parent,
        )

    def _resolve(self: Self, text: str, base: _Reference | None) -> tuple[_Reference | None, PartRanges, bool]:
        """Returns the resolved reference (None if it cannot be decomposed), the original ranges,
        and whether path simplification reached the root's parent.
        """
        m: re.Match[str] | None = _SCHEME_PREFIX_PAT.match(text)
        if m is not None:
            scheme: Scheme = self.schemes.lookup(m["scheme"])
            if scheme is UNKNOWN:
                _, original_ranges = _split(text, m.end(), _GENERIC)
                return None, original_ranges, False
            r, original_ranges = _split(text, m.end(), scheme)
            return self._finish(self._join(None, r), original_ranges)

        if base is None:
            logger.debug("relative reference %r has no base to resolve against", text)
            _, original_ranges = _split(text, 0, _GENERIC)
            return None, original_ranges, False
        r, original_ranges = _split(text, 0, base.scheme)
        if not base.scheme.hierarchical and (r.authority is not None or len(r.path) > 0):
            # Only a query or fragment can be applied to an opaque base.
            logger.debug("cannot resolve %r against opaque %s: URL", text, base.scheme)
            return None, original_ranges, False
        return self._finish(self._join(base, r), original_ranges)

    def _join(self: Self, base: _Reference | None, r: _Reference) -> tuple[_Reference, bool]:
        """The "Transform References" algorithm from RFC 3986 section 5.2.2.
        base is None when r carries its own scheme.
        """
        authority: str | None
        path: str
        query: str | None
        fragment: str | None = r.fragment
        reached_roots_parent: bool = False
        hierarchical: bool = r.scheme.hierarchical

        if base is None:
            authority = r.authority
            path, reached_roots_parent = _remove_dot_segments(r.path) if hierarchical else (r.path, False)
            query = r.query
        elif r.authority is not None:
            authority = r.authority
            path, reached_roots_parent = _remove_dot_segments(r.path)
            query = r.query
        else:
            if len(r.path) == 0:
                path = base.path
                if r.query is not None:
                    query = r.query
                else:
                    query = base.query
                    if r.fragment is None:
                        # An empty reference is the base itself.
                        fragment = base.fragment
            else:
                if r.path.startswith("/"):
                    # Leading ".." segments climb out of the base's directories first,
                    # so "/../bar" against "/foo/" reads as "/foo/../bar".
                    path, reached_roots_parent = _remove_dot_segments(r.path, parents=_directory_depth(base.path))
                else:
                    path, reached_roots_parent = _remove_dot_segments(_merge_paths(base, r))
                query = r.query
            authority = base.authority

        return (
            _Reference(scheme=r.scheme, authority=authority, path=path, query=query, fragment=fragment),
            reached_roots_parent,
        )

    def _finish(
        self: Self, joined: tuple[_Reference, bool], original_ranges: PartRanges
    ) -> tuple[_Reference, PartRanges, bool]:
        target, reached_roots_parent = joined
        if (
            target.authority is None
            and target.scheme.authority is Authority.REQUIRED
            and self.placeholder_authority is not None
        ):
            target.authority = self.placeholder_authority
            if len(target.path) > 0 and not target.path.startswith("/"):
                target.path = f"/{target.path}"
        if target.scheme.hierarchical:
            if target.authority is None and target.path.startswith("//"):
                # Otherwise the path would read back as an authority.
                target.path = f"/.{target.path}"
            elif target.authority is not None and len(target.path) == 0:
                # RFC 3986 section 6.2.3
                target.path = "/"
        return target, original_ranges, reached_roots_parent
