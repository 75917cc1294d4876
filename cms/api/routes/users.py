"""
Sign-up, sign-in and sign-out endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Form, Request, status

from cms.api.deps import Context, Gate, Identity
from cms.api.rendering import redirect, render_page
from cms.kernel.errors import CredentialError

router = APIRouter()


@router.get("/signin")
async def signin_form(request: Request, ctx: Context, gate: Gate):
    """Render the sign-in form, unless already signed in."""
    gate.gate_auth_pages(ctx, "signin")
    return render_page(request, ctx, "signin.html", form_username="")


@router.post("/signin")
def signin(
    request: Request,
    ctx: Context,
    gate: Gate,
    identity: Identity,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Check credentials and bind the session to the user."""
    gate.gate_auth_pages(ctx, "signin")
    try:
        identity.sign_in(ctx, username, password)
    except CredentialError as e:
        return render_page(
            request, ctx, "signin.html",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error=e.message,
            form_username=username,
        )
    return redirect(ctx, "/", "Welcome!")


@router.get("/signup")
async def signup_form(request: Request, ctx: Context, gate: Gate):
    """Render the sign-up form, unless already signed in."""
    gate.gate_auth_pages(ctx, "signup")
    return render_page(request, ctx, "signup.html", form_username="")


@router.post("/signup")
def signup(
    request: Request,
    ctx: Context,
    gate: Gate,
    identity: Identity,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    confirm_password: Annotated[str, Form()] = "",
):
    """
    Create an account and sign it in.

    Validation failures re-render the form with the username kept.
    """
    gate.gate_auth_pages(ctx, "signup")
    try:
        identity.sign_up(ctx, username, password, confirm_password)
    except CredentialError as e:
        return render_page(
            request, ctx, "signup.html",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error=e.message,
            form_username=username,
        )
    return redirect(ctx, "/", "Welcome!")


@router.post("/signout")
async def signout(ctx: Context, identity: Identity):
    identity.sign_out(ctx)
    return redirect(ctx, "/", "You have been signed out.")
