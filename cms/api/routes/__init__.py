"""
Route table.

Routers are matched top-down in the order included here: fixed paths
(/users/..., /files/...) before the document routes, whose /{name}.{ext}
catch-all must stay last so /files/new never reads as a document.
"""

from fastapi import APIRouter

from cms.api.routes import documents, files, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(files.router, prefix="/files", tags=["Files"])
router.include_router(documents.router, tags=["Documents"])
