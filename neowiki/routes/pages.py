#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pages router
============
GET    /api/v1/pages/{title}       — rendered page
GET    /api/v1/pages/{title}/raw   — raw markup
PUT    /api/v1/pages/{title}       — create or replace
DELETE /api/v1/pages/{title}       — delete

Titles may contain slashes (``Template:Box/Header``).
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from neowiki.core.database import get_db
from neowiki.core.dependencies import get_title_index
from neowiki.schemas import OKResponse, PageRaw, PageResponse, PageSave
from neowiki.services import pages as page_svc
from neowiki.services.title_index import TitleIndex


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/pages", tags=["pages"])


# ── Raw source ────────────────────────────────────────────────────────────────

# Registered before the rendered view so ".../raw" is not read as part of the title
@router.get("/{title:path}/raw", response_model=PageRaw)
async def get_page_raw(
    title: str,
    db: AsyncSession = Depends(get_db),
):
    return await page_svc.get_page(db, title)


# ── Read ──────────────────────────────────────────────────────────────────────

@router.get("/{title:path}", response_model=PageResponse)
async def get_page(
    title: str,
    db: AsyncSession = Depends(get_db),
):
    return await page_svc.render_page(db, title)


# ── Save ──────────────────────────────────────────────────────────────────────

@router.put("/{title:path}", response_model=PageResponse)
async def save_page(
    title: str,
    data: PageSave,
    response: Response,
    db: AsyncSession  = Depends(get_db),
    index: TitleIndex = Depends(get_title_index),
):
    page, created = await page_svc.save_page(db, title, data.content, index)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return await page_svc.render_page(db, page.title)


# ── Delete ────────────────────────────────────────────────────────────────────

@router.delete("/{title:path}", response_model=OKResponse)
async def delete_page(
    title: str,
    db: AsyncSession  = Depends(get_db),
    index: TitleIndex = Depends(get_title_index),
):
    await page_svc.delete_page(db, title, index)
    return OKResponse(message=f"Page '{title}' deleted")


# -----------------------------------------------------------------------------
