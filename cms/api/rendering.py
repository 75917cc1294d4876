"""
Response helpers: HTML pages, redirects, and document bodies by content kind.
"""

import mimetypes
from pathlib import Path
from typing import Any, Optional

import markdown
from fastapi import Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from cms.kernel.context import RequestContext
from cms.kernel.documents import ContentKind, content_kind

_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


def render_page(
    request: Request,
    ctx: RequestContext,
    template: str,
    status_code: int = status.HTTP_200_OK,
    **values: Any,
) -> HTMLResponse:
    """Render a page; consumes the pending flash message."""
    context = {
        "flash": ctx.take_flash(),
        "username": ctx.username,
        **values,
    }
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def redirect(ctx: RequestContext, location: str, message: Optional[str] = None) -> RedirectResponse:
    if message:
        ctx.flash(message)
    return RedirectResponse(location, status_code=status.HTTP_302_FOUND)


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=["fenced_code", "tables"])


def document_response(name: str, content: bytes) -> Response:
    """Body for a document or revision, interpreted by the name's extension."""
    kind = content_kind(name)
    if kind is ContentKind.MARKDOWN:
        return HTMLResponse(render_markdown(content.decode("utf-8", errors="replace")))
    if kind is ContentKind.BINARY:
        media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return Response(content, media_type=media_type)
    return PlainTextResponse(content.decode("utf-8", errors="replace"))
