#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Value types shared by the markup pipeline: parser options in, parse result
(HTML + table of contents + footnotes) out.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from neowiki.core.config import Settings


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ParseOptions:
    enable_external_links: bool = True
    enable_images: bool = True
    base_url: str = "/w/"
    # Accepted for parity with the upload service; images resolve through
    # ``file_api_url`` (lookup by original file name).
    image_base_url: str = "/uploads/"
    file_api_url: str = "/api/upload/file/"
    folding_label: str = "Expand"
    footnotes_heading: str = "Footnotes"
    date_format: str = "%Y-%m-%d"
    datetime_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ParseOptions":
        return cls(
            enable_external_links=settings.enable_external_links,
            enable_images=settings.enable_images,
            base_url=settings.wiki_base_url,
            image_base_url=settings.image_base_url,
            file_api_url=settings.file_api_url,
            folding_label=settings.folding_label,
            footnotes_heading=settings.footnotes_heading,
            date_format=settings.date_format,
            datetime_format=settings.datetime_format,
        )


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TocEntry:
    level: int
    title: str
    anchor_id: str


@dataclass(frozen=True)
class Footnote:
    id: Union[str, int]     # explicit label, or the sequential index
    content: str
    index: int


@dataclass
class ParseResult:
    html: str
    toc: list[TocEntry] = field(default_factory=list)
    footnotes: list[Footnote] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "html":      self.html,
            "toc":       [asdict(t) for t in self.toc],
            "footnotes": [asdict(f) for f in self.footnotes],
        }


# -----------------------------------------------------------------------------
