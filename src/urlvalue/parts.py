"""urlvalue.parts
Where each URL component sits inside a single string.
"""

import dataclasses

from typing import Self


@dataclasses.dataclass(frozen=True)
class Span:
    """A half-open [left, right) range of character offsets. An absent component has no Span at all (None)."""

    left: int
    right: int

    def __post_init__(self: Self) -> None:
        if not 0 <= self.left <= self.right:
            raise ValueError(f"bad span [{self.left}, {self.right})")

    def __len__(self: Self) -> int:
        return self.right - self.left

    def slice(self: Self, text: str) -> str:
        return text[self.left : self.right]


@dataclasses.dataclass(frozen=True)
class PartRanges:
    """Component boundaries within one URL string.

    The query span includes its leading "?" and the fragment span its leading "#".
    The authority span excludes the "//" before it.
    content_metadata is only set for data: URLs, where it overlays the start of the path.
    """

    authority: Span | None = None
    path: Span | None = None
    query: Span | None = None
    fragment: Span | None = None
    content_metadata: Span | None = None

    def __post_init__(self: Self) -> None:
        last: int = 0
        for span in (self.authority, self.path, self.query, self.fragment):
            if span is None:
                continue
            if span.left < last:
                raise ValueError("part ranges out of order")
            last = span.right
        if self.content_metadata is not None and (
            self.path is None
            or self.content_metadata.left != self.path.left
            or self.content_metadata.right > self.path.right
        ):
            raise ValueError("content metadata must start the path")
