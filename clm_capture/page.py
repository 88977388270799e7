"""In-memory page source and the JSON page-dump loader."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlsplit

logger = logging.getLogger(__name__)

ROW = "row"
BLOCK = "block"
LINK = "link"

REGION_KINDS = (ROW, BLOCK, LINK)


@dataclass(frozen=True)
class PageAddress:
    """Current address of a page: origin host, path and query parameters."""

    url: str
    host: str = ""
    path: str = ""
    query: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_url(cls, url: str) -> PageAddress:
        parts = urlsplit(url)
        return cls(
            url=url,
            host=(parts.hostname or "").lower(),
            path=parts.path,
            query=dict(parse_qsl(parts.query)),
        )


@dataclass(frozen=True)
class Region:
    """A structural region of the page and its flattened text.

    ``parents`` lists the enclosing regions, nearest first.
    """

    text: str
    cells: tuple[str, ...] = ()
    href: str = ""
    hrefs: tuple[str, ...] = ()
    parents: tuple[Region, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | str) -> Region:
        if isinstance(raw, str):
            return cls(text=raw)
        return cls(
            text=raw.get("text", ""),
            cells=tuple(raw.get("cells", [])),
            href=raw.get("href", ""),
            hrefs=tuple(raw.get("hrefs", [])),
            parents=tuple(cls.from_dict(p) for p in raw.get("parents", [])),
        )


class StaticPage:
    """Page source backed by already-rendered page data."""

    def __init__(
        self,
        url: str,
        text: str = "",
        regions: dict[str, list[Region]] | None = None,
        title: str = "",
    ) -> None:
        self._address = PageAddress.from_url(url)
        self._text = text
        self._regions = {kind: list(items) for kind, items in (regions or {}).items()}
        self.title = title

    @property
    def address(self) -> PageAddress:
        return self._address

    def text(self) -> str:
        return self._text

    def regions(self, kind: str) -> list[Region]:
        return list(self._regions.get(kind, []))

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> StaticPage:
        if "url" not in raw:
            raise ValueError("Page dump has no 'url'")
        raw_regions = raw.get("regions", {})
        regions = {
            kind: [Region.from_dict(r) for r in raw_regions.get(kind, [])]
            for kind in REGION_KINDS
        }
        return cls(
            url=raw["url"],
            text=raw.get("text", ""),
            regions=regions,
            title=raw.get("title", ""),
        )


def load_page(path: str | Path) -> StaticPage:
    """Load a JSON page dump produced by the browser-side capture script."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Page dump not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    page = StaticPage.from_dict(raw)
    logger.debug(
        "Loaded page %s (%d chars, %s)",
        page.address.url,
        len(page.text()),
        ", ".join(f"{k}={len(page.regions(k))}" for k in REGION_KINDS),
    )
    return page
