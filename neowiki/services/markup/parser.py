#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Wiki parser
===========
Runs the full render pipeline over one document:

    source --> blocks --> inline --> raw blocks back --> sanitize --> inline code back

Inline code is restored last, already escaped, so that its text is shown
literally and never reaches the sanitizer as markup.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Optional

from .blocks import BlockScanner
from .inline import InlineFormatter
from .model import Footnote, ParseOptions, ParseResult, TocEntry
from .sanitizer import sanitize


log = logging.getLogger(__name__)

# Private-use characters reserved for internal placeholders
_RESERVED_RE = re.compile("[\ue000-\ue003]")


# -----------------------------------------------------------------------------

class WikiParser:
    """Reusable parser.  ``toc`` and ``footnotes`` describe the most recent parse."""

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.options = options or ParseOptions()
        self._clock = clock
        self.toc: list[TocEntry] = []
        self.footnotes: list[Footnote] = []

    def parse(self, text: str) -> ParseResult:
        text = (text or "").replace("\r\n", "\n").replace("\r", "\n")
        text = _RESERVED_RE.sub("", text)

        scanner = BlockScanner(self.options)
        formatter = InlineFormatter(self.options, self._clock)

        html = scanner.parse_blocks(text)
        html = formatter.parse_inline(html)
        html = scanner.restore_raw(html)
        html = sanitize(html)
        html = formatter.restore_code(html)

        self.toc = scanner.toc
        self.footnotes = formatter.footnotes
        log.debug(
            "Parsed %d chars: %d headings, %d footnotes",
            len(text), len(self.toc), len(self.footnotes),
        )
        return ParseResult(html=html, toc=list(self.toc), footnotes=list(self.footnotes))


def parse(
    text: str,
    options: Optional[ParseOptions] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ParseResult:
    """Render *text* with a fresh :class:`WikiParser`."""
    return WikiParser(options, clock).parse(text)


# -----------------------------------------------------------------------------
