#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Template expansion
==================
Resolves ``[include(Name, key=value, ...)]`` directives against the document
store before the source is parsed.

    [include(Infobox, name=Seoul, pop=9.7M)]

* ``Infobox`` is looked up as ``Template:Infobox`` unless it already carries
  a template namespace prefix.
* ``{{{name}}}`` / ``{{{pop}}}`` in the template body are replaced with the
  supplied values; placeholders with no value are removed.
* Bodies are expanded recursively.  A template that (directly or indirectly)
  includes itself yields an inline error marker; nesting deeper than
  ``MAX_DEPTH`` is left unexpanded.
* A missing template becomes a link to its (not yet existing) page.

Expansion is pure text-to-text and never raises for any input.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from neowiki.models import Page


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

MAX_DEPTH = 10

TEMPLATE_PREFIXES = ("Template:", "틀:")

_INCLUDE_RE = re.compile(r"\[include\(([^)]*)\)\]", re.IGNORECASE)

# {{{identifier}}} only; {{{#!...}}}, {{{+1 ...}}} and friends are markup
_PARAM_RE = re.compile(r"\{\{\{(\w+)\}\}\}")


# -----------------------------------------------------------------------------
# Document sources
# -----------------------------------------------------------------------------

class DocumentSource(Protocol):
    """Read-only, synchronous lookup of a document body by title."""

    def get_content(self, title: str) -> Optional[str]:
        ...


class MappingDocumentSource:
    """Documents held in a plain dict (previews, tests)."""

    def __init__(self, documents: Mapping[str, str]) -> None:
        self._documents = documents

    def get_content(self, title: str) -> Optional[str]:
        return self._documents.get(title)


class SessionDocumentSource:
    """Documents read from the ``pages`` table through a synchronous Session.

    Use from async code via ``AsyncSession.run_sync``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_content(self, title: str) -> Optional[str]:
        return self._session.execute(
            select(Page.content).where(Page.title == title)
        ).scalar_one_or_none()


# -----------------------------------------------------------------------------
# Expander
# -----------------------------------------------------------------------------

def parse_reference(reference: str) -> tuple[str, dict[str, str]]:
    """Split ``"Name, a=1, b=2"`` into ``("Name", {"a": "1", "b": "2"})``."""
    parts = reference.split(",")
    name = parts[0].strip()
    params: dict[str, str] = {}
    for part in parts[1:]:
        key, sep, value = part.partition("=")
        if sep and key.strip():
            params[key.strip()] = value.strip()
    return name, params


class TemplateExpander:

    def __init__(
        self,
        source: DocumentSource,
        namespace: str = "Template:",
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self.source = source
        self.namespace = namespace
        self.max_depth = max_depth

    def canonical_name(self, name: str) -> str:
        if name.startswith(TEMPLATE_PREFIXES) or name.startswith(self.namespace):
            return name
        return f"{self.namespace}{name}"

    def expand(self, text: str, visited: frozenset[str] = frozenset(), depth: int = 0) -> str:
        """Replace every include directive in *text* with its expanded template body."""
        if depth > self.max_depth:
            log.warning("Template nesting deeper than %d levels; left unexpanded", self.max_depth)
            return text
        return _INCLUDE_RE.sub(lambda m: self._include(m, visited, depth), text)

    def _include(self, m: re.Match, visited: frozenset[str], depth: int) -> str:
        name, params = parse_reference(m.group(1))
        if not name:
            return m.group(0)

        title = self.canonical_name(name)
        if title in visited:
            log.warning("Template include loop: %s", title)
            return f"'''[include loop: {title}]'''"

        body = self.source.get_content(title)
        if body is None:
            log.info("Template not found: %s", title)
            return f"[[{title}|{title}]]"

        for key, value in params.items():
            body = body.replace("{{{" + key + "}}}", value)
        body = _PARAM_RE.sub("", body)

        return self.expand(body, visited | {title}, depth + 1)


def expand_templates(text: str, source: DocumentSource, namespace: str = "Template:") -> str:
    return TemplateExpander(source, namespace).expand(text)


# -----------------------------------------------------------------------------
