#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Shared FastAPI dependencies.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import Request

from neowiki.services.title_index import TitleIndex


# -----------------------------------------------------------------------------

def get_title_index(request: Request) -> TitleIndex:
    """The process-wide title index, created by the app lifespan."""
    return request.app.state.title_index


# -----------------------------------------------------------------------------
