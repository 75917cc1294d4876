"""
FastAPI dependencies: request context, access gate and storage components.
"""

from typing import Annotated, Optional
from urllib.parse import urlparse

from fastapi import Depends, Request

from cms.config import Settings, get_settings
from cms.kernel.context import RequestContext
from cms.kernel.documents import DocumentStore, PathResolver, RevisionEngine
from cms.kernel.identity import CredentialStore, IdentityService
from cms.kernel.permissions import AccessGate
from cms.logging_config import username_var


SettingsDep = Annotated[Settings, Depends(get_settings)]


def _referrer_path(request: Request) -> Optional[str]:
    """Path part of the Referer header; never an off-site URL."""
    referer = request.headers.get("referer")
    if not referer:
        return None
    return urlparse(referer).path or None


def context_from_request(request: Request) -> RequestContext:
    """Build the request context; also usable outside dependency injection."""
    return RequestContext(
        path=request.url.path,
        session=request.session,
        referrer=_referrer_path(request),
    )


async def get_context(request: Request) -> RequestContext:
    """Dependency that yields the request context and tags logs with the user."""
    ctx = context_from_request(request)
    username_var.set(ctx.username)
    return ctx


Context = Annotated[RequestContext, Depends(get_context)]


def get_access_gate() -> AccessGate:
    return AccessGate()


async def enforce_access(
    ctx: Context,
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> None:
    """Router-wide dependency: refuse restricted paths to anonymous sessions."""
    gate.authorize(ctx, ctx.path)


Gate = Annotated[AccessGate, Depends(get_access_gate)]


def get_resolver(settings: SettingsDep) -> PathResolver:
    return PathResolver(settings.documents_root, settings.uploads_root)


Resolver = Annotated[PathResolver, Depends(get_resolver)]


def get_revision_engine(resolver: Resolver) -> RevisionEngine:
    return RevisionEngine(resolver)


Revisions = Annotated[RevisionEngine, Depends(get_revision_engine)]


def get_document_store(resolver: Resolver, revisions: Revisions) -> DocumentStore:
    return DocumentStore(resolver, revisions)


Documents = Annotated[DocumentStore, Depends(get_document_store)]


def get_credential_store(settings: SettingsDep) -> CredentialStore:
    return CredentialStore(settings.credentials_path)


def get_identity_service(
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
) -> IdentityService:
    return IdentityService(credentials)


Identity = Annotated[IdentityService, Depends(get_identity_service)]
