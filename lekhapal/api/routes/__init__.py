"""
API Routes Package
==================

FastAPI routers for the tables service.
"""

from lekhapal.api.routes.documents import router as documents_router
from lekhapal.api.routes.tables import router as tables_router
from lekhapal.api.routes.upload import router as upload_router

__all__ = ["documents_router", "tables_router", "upload_router"]
