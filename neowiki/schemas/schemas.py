#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


MAX_CONTENT_LENGTH = 1_000_000


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Shared
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OKResponse(BaseModel):
    ok: bool = True
    message: str = "success"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TocEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: int
    title: str
    anchor_id: str


class FootnoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    content: str
    index: int


# -----------------------------------------------------------------------------

class RenderRequest(BaseModel):
    content: str = Field(default="", max_length=MAX_CONTENT_LENGTH)
    title: Optional[str] = Field(default=None, max_length=512)


class RenderResponse(BaseModel):
    html: str
    toc: list[TocEntryResponse] = []
    footnotes: list[FootnoteResponse] = []


class ExpandRequest(BaseModel):
    content: str = Field(default="", max_length=MAX_CONTENT_LENGTH)


class ExpandResponse(BaseModel):
    content: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageSave(BaseModel):
    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)


class PageRaw(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    content: str


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    html: str = ""
    toc: list[TocEntryResponse] = []
    footnotes: list[FootnoteResponse] = []
    categories: list[str] = []
    links: list[str] = []
    created_at: datetime
    updated_at: datetime


# -----------------------------------------------------------------------------
