"""
File CMS

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from cms.api.deps import context_from_request, enforce_access
from cms.api.middleware.request_id import RequestIdMiddleware
from cms.api.rendering import redirect
from cms.api.routes import router as cms_router
from cms.config import get_settings
from cms.kernel.errors import AlreadySignedIn, CMSError, IOFailure, NotFound, Unauthorized
from cms.kernel.permissions import AccessGate, AccessLevel
from cms.logging_config import configure_logging, get_logger
from cms.schemas.common import ErrorResponse, HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Configures logging and makes sure the storage roots exist.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s (%s)", settings.project_name, settings.version, settings.environment)
    for root in (settings.documents_root, settings.uploads_root):
        root.mkdir(parents=True, exist_ok=True)
    logger.info("Storage ready", extra={"documents_root": str(settings.documents_root)})

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.project_name,
    description="""
    File CMS

    Create, read, edit, duplicate and delete text, markdown and image
    documents stored as plain files.

    ## Invariants

    1. Every edit archives the previous content as a numbered revision first
    2. Restricted actions (new, create, edit, delete, duplicate, upload,
       signout) require a signed-in session
    3. Missing documents and refused actions redirect with a flash message
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
)


# add_middleware stacks innermost-first: the session must wrap the routes and
# the exception handlers that flash messages; request IDs wrap everything.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.environment == "production",
)
app.add_middleware(RequestIdMiddleware)


def _error_content(request: Request, exc: Exception, detail: str) -> dict:
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        body = ErrorResponse(detail=str(exc), type=type(exc).__name__, request_id=req_id)
    else:
        body = ErrorResponse(detail=detail, request_id=req_id)
    return body.model_dump(exclude_none=True)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    """Missing document or revision: back to the index with a message."""
    return redirect(context_from_request(request), "/", exc.message)


@app.exception_handler(Unauthorized)
@app.exception_handler(AlreadySignedIn)
async def refused_handler(request: Request, exc: CMSError):
    """Refused action: back to where the user came from, with a message."""
    ctx = context_from_request(request)
    target = ctx.return_path
    # Never bounce back onto a page that would refuse again
    if target == request.url.path or AccessGate().classify(target) is AccessLevel.RESTRICTED:
        target = "/"
    return redirect(ctx, target, exc.message)


@app.exception_handler(IOFailure)
async def io_failure_handler(request: Request, exc: IOFailure):
    """Storage failed mid-request; nothing is retried or papered over."""
    logger.error("Storage failure: %s", exc.message, exc_info=exc.__cause__ or exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(request, exc, exc.message),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(request, exc, "Internal server error"),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        environment=settings.environment,
    )


# Every CMS route passes the access gate before its handler runs
app.include_router(cms_router, dependencies=[Depends(enforce_access)])


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
