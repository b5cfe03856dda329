#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Search router
=============
GET /api/v1/search/titles?q=...&limit=...   — title autocomplete
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from neowiki.core.config import get_settings
from neowiki.core.dependencies import get_title_index
from neowiki.services.title_index import TitleIndex


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/search", tags=["search"])


# -----------------------------------------------------------------------------

@router.get("/titles", response_model=list[str])
async def search_titles(
    q:     str           = Query("", max_length=256, description="Partial title"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    index: TitleIndex    = Depends(get_title_index),
):
    return index.search(q, limit or get_settings().autocomplete_limit)


# -----------------------------------------------------------------------------
