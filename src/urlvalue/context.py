"""urlvalue.context
The environment a URL is interpreted in.
"""

import dataclasses

from typing import ClassVar, Self

from .absolutizer import Absolutizer
from .scheme import DEFAULT_SCHEMES, SchemeRegistry

# Substituted for the authority of a URL that needs one but neither has one nor can inherit one.
# It is not a valid host, so a URL that spells it out never passes for one that inherited it.
PLACEHOLDER_AUTHORITY: str = "[*]"


@dataclasses.dataclass(frozen=True)
class URLContext:
    """A base URL, a placeholder authority and a scheme registry, shared by every URLValue built in it."""

    DEFAULT: ClassVar["URLContext"]

    base_url: str | None = None
    placeholder_authority: str | None = PLACEHOLDER_AUTHORITY
    schemes: SchemeRegistry = DEFAULT_SCHEMES
    absolutizer: Absolutizer = dataclasses.field(init=False, repr=False, compare=False)

    def __post_init__(self: Self) -> None:
        object.__setattr__(
            self,
            "absolutizer",
            Absolutizer(self.schemes, base_url=self.base_url, placeholder_authority=self.placeholder_authority),
        )


URLContext.DEFAULT = URLContext()
