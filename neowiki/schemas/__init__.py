from neowiki.schemas.schemas import (
    OKResponse,
    TocEntryResponse, FootnoteResponse,
    RenderRequest, RenderResponse,
    ExpandRequest, ExpandResponse,
    PageSave, PageRaw, PageResponse,
    MAX_CONTENT_LENGTH,
)

__all__ = [
    "OKResponse",
    "TocEntryResponse", "FootnoteResponse",
    "RenderRequest", "RenderResponse",
    "ExpandRequest", "ExpandResponse",
    "PageSave", "PageRaw", "PageResponse",
    "MAX_CONTENT_LENGTH",
]
