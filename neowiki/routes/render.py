#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoints, live preview for the editor.

POST /api/v1/render          {content, title?}  -> {html, toc, footnotes}
POST /api/v1/render/expand   {content}          -> {content}   (templates only)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from neowiki.core.database import get_db
from neowiki.schemas import ExpandRequest, ExpandResponse, RenderRequest, RenderResponse
from neowiki.services import pages as page_svc


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

@router.post("", response_model=RenderResponse)
async def render_preview(
    data: RenderRequest,
    db: AsyncSession = Depends(get_db),
):
    """Expand templates and render a snippet of wiki markup."""
    result = await page_svc.render_content(db, data.content, data.title)
    return result.to_dict()


@router.post("/expand", response_model=ExpandResponse)
async def expand_preview(
    data: ExpandRequest,
    db: AsyncSession = Depends(get_db),
):
    content = await page_svc.expand_templates(db, data.content)
    return {"content": content}


# -----------------------------------------------------------------------------
