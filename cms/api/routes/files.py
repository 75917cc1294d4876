"""
File endpoints: create, delete, duplicate and upload.

Every path here has a restricted second segment, so the access gate has
already refused anonymous sessions before any handler runs.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from cms.api.deps import Context, Documents
from cms.api.rendering import redirect, render_page
from cms.config import DOCUMENT_EXTENSIONS, IMAGE_EXTENSIONS
from cms.kernel.documents import FilenamePolicy, StorageRoot
from cms.kernel.errors import InvalidName, PolicyViolation

router = APIRouter()

document_policy = FilenamePolicy(DOCUMENT_EXTENSIONS)
image_policy = FilenamePolicy(IMAGE_EXTENSIONS)


@router.get("/new")
async def new_document_form(request: Request, ctx: Context):
    return render_page(
        request, ctx, "new.html",
        filename="",
        extensions=sorted(DOCUMENT_EXTENSIONS),
    )


@router.post("/create")
def create_document(
    request: Request,
    ctx: Context,
    store: Documents,
    filename: Annotated[str, Form()] = "",
    content: Annotated[str, Form()] = "",
):
    """Validate the name, then create the document (empty unless content given)."""
    try:
        name = document_policy.validate_new_name(filename, store.list(StorageRoot.DOCUMENTS))
        store.create(name, content.encode("utf-8"))
    except PolicyViolation as e:
        return render_page(
            request, ctx, "new.html",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error=e.message,
            filename=filename,
            content=content,
            extensions=sorted(DOCUMENT_EXTENSIONS),
        )
    return redirect(ctx, "/", f"{name} was created.")


@router.post("/delete/{name}")
def delete_document(ctx: Context, store: Documents, name: str):
    """Delete a document together with its revision history."""
    store.delete(name)
    return redirect(ctx, "/", f"{name} has been deleted.")


@router.post("/duplicate/{name}")
def duplicate_document(ctx: Context, store: Documents, name: str):
    new_name = store.duplicate(name)
    return redirect(ctx, "/", f"{name} was duplicated as {new_name}.")


@router.get("/upload")
async def upload_form(request: Request, ctx: Context):
    return render_page(request, ctx, "upload.html", extensions=sorted(IMAGE_EXTENSIONS))


@router.post("/upload")
def upload_image(
    request: Request,
    ctx: Context,
    store: Documents,
    file: Annotated[Optional[UploadFile], File()] = None,
):
    """Store an uploaded image under the upload root."""
    try:
        if file is None or not file.filename:
            raise InvalidName("Choose an image to upload.")
        name = image_policy.validate_new_name(file.filename, store.list(StorageRoot.UPLOADS))
        store.create(name, file.file.read())
    except PolicyViolation as e:
        return render_page(
            request, ctx, "upload.html",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error=e.message,
            extensions=sorted(IMAGE_EXTENSIONS),
        )
    return redirect(ctx, "/", f"{name} was uploaded.")
