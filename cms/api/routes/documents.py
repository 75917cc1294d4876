"""
Document endpoints: index, read, edit and revision history.

The ``/{name}.{ext}`` catch-all is registered last in this router, and this
router is included after every fixed-path router.
"""

from typing import Annotated

from fastapi import APIRouter, Form, Request

from cms.api.deps import Context, Documents, Revisions
from cms.api.rendering import document_response, redirect, render_page
from cms.kernel.documents import ContentKind, StorageRoot, content_kind
from cms.kernel.errors import NotFound

router = APIRouter()


def _require_editable(name: str) -> None:
    if content_kind(name) is ContentKind.BINARY:
        raise NotFound(f"{name} is not an editable document.")


@router.get("/")
def index(request: Request, ctx: Context, store: Documents):
    """List documents and uploaded images."""
    return render_page(
        request, ctx, "index.html",
        documents=store.list(StorageRoot.DOCUMENTS),
        uploads=store.list(StorageRoot.UPLOADS),
    )


@router.get("/{name}/edit")
def edit_form(request: Request, ctx: Context, store: Documents, name: str):
    _require_editable(name)
    content = store.read(name).decode("utf-8", errors="replace")
    return render_page(request, ctx, "edit.html", name=name, content=content)


@router.post("/{name}/edit")
def save_document(
    ctx: Context,
    store: Documents,
    name: str,
    content: Annotated[str, Form()] = "",
):
    """Archive the current content as a new revision, then save the edit."""
    _require_editable(name)
    store.update(name, content.encode("utf-8"))
    return redirect(ctx, "/", f"{name} has been updated.")


@router.get("/{name}/revisions")
def list_revisions(
    request: Request,
    ctx: Context,
    store: Documents,
    revisions: Revisions,
    name: str,
):
    if not store.exists(name):
        raise NotFound(f"{name} does not exist.")
    return render_page(
        request, ctx, "revisions.html",
        name=name,
        revisions=revisions.list_revisions(name),
    )


@router.get("/{name}/revisions/{number}")
def read_revision(revisions: Revisions, name: str, number: int):
    return document_response(name, revisions.read_revision(name, number))


@router.get("/{name}.{ext}")
def read_document(store: Documents, name: str, ext: str):
    filename = f"{name}.{ext}"
    return document_response(filename, store.read(filename))
