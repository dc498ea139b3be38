"""API Routes for MailBlocks."""

from mailblocks.infrastructure.api.routes.designs_router import router as designs_router
from mailblocks.infrastructure.api.routes.preview_router import router as preview_router
from mailblocks.infrastructure.api.routes.templates_router import router as templates_router
from mailblocks.infrastructure.api.routes.uploads_router import router as uploads_router

__all__ = [
    "designs_router",
    "preview_router",
    "templates_router",
    "uploads_router",
]
