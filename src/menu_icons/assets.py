"""Script and stylesheet references handed to the editor screen."""

from dataclasses import dataclass, field
from typing import List, Literal


@dataclass(frozen=True)
class Asset:
    """One enqueued script or stylesheet.

    Attributes:
        handle: Unique name of the asset.
        kind: "script" or "style".
        src: URL of the file.
        deps: Handles that must load first.
        version: Appended as a cache-busting query string.
        in_footer: Scripts only; load at the end of the body.
    """

    handle: str
    kind: Literal["script", "style"]
    src: str
    deps: List[str] = field(default_factory=list)
    version: str = ""
    in_footer: bool = False

    @property
    def url(self) -> str:
        if not self.version:
            return self.src
        separator = "&" if "?" in self.src else "?"
        return f"{self.src}{separator}ver={self.version}"


def script_suffix(debug: bool) -> str:
    """Minified assets unless debugging."""
    return "" if debug else ".min"
