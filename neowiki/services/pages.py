#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page service
============
Document store access for the render pipeline: fetch, save and delete pages,
expand templates against the store and render a page for display.

Saves and deletes are committed here so the title index is only touched once
the row change is durable.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from neowiki.core.config import get_settings
from neowiki.models import Page
from neowiki.services.markup import ParseOptions, ParseResult, extract_categories, extract_links, parse
from .templates import SessionDocumentSource, TemplateExpander
from .title_index import TitleIndex


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _normalize_title(title: str) -> str:
    title = " ".join(title.split())
    if not title:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Page title must not be empty",
        )
    return title


async def _find_page(db: AsyncSession, title: str) -> Optional[Page]:
    result = await db.execute(select(Page).where(Page.title == title))
    return result.scalar_one_or_none()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CRUD
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def get_page(db: AsyncSession, title: str) -> Page:
    page = await _find_page(db, _normalize_title(title))
    if not page:
        raise HTTPException(status_code=404, detail=f"Page '{title}' not found")
    return page


async def list_titles(db: AsyncSession) -> list[str]:
    result = await db.execute(select(Page.title).order_by(Page.title))
    return list(result.scalars().all())


# -----------------------------------------------------------------------------

async def save_page(
    db: AsyncSession,
    title: str,
    content: str,
    index: Optional[TitleIndex] = None,
) -> tuple[Page, bool]:
    """Create or replace a page.  Returns ``(page, created)``."""
    title = _normalize_title(title)
    page = await _find_page(db, title)
    created = page is None

    if created:
        page = Page(title=title, content=content)
        db.add(page)
    else:
        page.content = content

    await db.commit()
    await db.refresh(page)

    if created:
        log.info("Page created: %s", title)
        if index is not None:
            index.add(title)
    return page, created


async def delete_page(
    db: AsyncSession,
    title: str,
    index: Optional[TitleIndex] = None,
) -> None:
    page = await get_page(db, title)
    await db.delete(page)
    await db.commit()
    log.info("Page deleted: %s", page.title)
    if index is not None:
        index.remove(page.title)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Rendering
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def expand_templates(db: AsyncSession, content: str, title: Optional[str] = None) -> str:
    """Expand ``[include(...)]`` directives using templates stored in *db*.

    When *title* is given, the page being rendered counts as already visited,
    so a template that includes itself is reported as a loop at once.
    """
    namespace = get_settings().template_namespace
    visited = frozenset({title}) if title else frozenset()

    def _expand(session: Session) -> str:
        expander = TemplateExpander(SessionDocumentSource(session), namespace)
        return expander.expand(content, visited)

    return await db.run_sync(_expand)


async def render_content(db: AsyncSession, content: str, title: Optional[str] = None) -> ParseResult:
    expanded = await expand_templates(db, content, title)
    return parse(expanded, ParseOptions.from_settings(get_settings()))


async def render_page(db: AsyncSession, title: str) -> dict:
    """Page fields plus rendered HTML, TOC, footnotes, categories and links."""
    page = await get_page(db, title)
    result = await render_content(db, page.content, page.title)
    return {
        "id":         page.id,
        "title":      page.title,
        "created_at": page.created_at,
        "updated_at": page.updated_at,
        "categories": extract_categories(page.content),
        "links":      extract_links(page.content),
        **result.to_dict(),
    }


# -----------------------------------------------------------------------------
