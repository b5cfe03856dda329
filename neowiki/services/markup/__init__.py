from .inline import extract_categories, extract_links
from .model import Footnote, ParseOptions, ParseResult, TocEntry
from .parser import WikiParser, parse
from .sanitizer import sanitize

__all__ = [
    "Footnote",
    "ParseOptions",
    "ParseResult",
    "TocEntry",
    "WikiParser",
    "extract_categories",
    "extract_links",
    "parse",
    "sanitize",
]
