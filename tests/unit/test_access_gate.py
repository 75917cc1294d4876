"""Unit tests for the access gate."""

import pytest

from cms.kernel.context import RequestContext
from cms.kernel.errors import AlreadySignedIn, Unauthorized
from cms.kernel.permissions import AccessGate, AccessLevel


class TestClassify:

    gate = AccessGate()

    @pytest.mark.parametrize("path", [
        "/files/new",
        "/files/create",
        "/files/delete/about.md",
        "/files/duplicate/about.md",
        "/about.md/edit",
        "/users/signout",
        "/files/upload",
    ])
    def test_restricted(self, path):
        assert self.gate.classify(path) is AccessLevel.RESTRICTED

    @pytest.mark.parametrize("path", [
        "/",
        "/about.md",
        "/about.md/revisions",
        "/about.md/revisions/2",
        "/users/signin",
        "/users/signup",
        "/health",
        "/edit",
    ])
    def test_public(self, path):
        assert self.gate.classify(path) is AccessLevel.PUBLIC


class TestAuthorize:

    gate = AccessGate()

    def test_anonymous_refused_on_restricted(self):
        with pytest.raises(Unauthorized) as exc:
            self.gate.authorize(RequestContext(path="/files/new"), "/files/new")
        assert exc.value.message == "You must be signed in to do that."

    def test_anonymous_allowed_on_public(self):
        self.gate.authorize(RequestContext(path="/about.md"), "/about.md")

    def test_signed_in_allowed_on_restricted(self):
        ctx = RequestContext(path="/files/new", session={"username": "admin"})
        self.gate.authorize(ctx, "/files/new")


class TestGateAuthPages:

    gate = AccessGate()

    @pytest.mark.parametrize("action", ["signin", "signup"])
    def test_signed_in_is_turned_away(self, action):
        ctx = RequestContext(path=f"/users/{action}", session={"username": "admin"})
        with pytest.raises(AlreadySignedIn):
            self.gate.gate_auth_pages(ctx, action)

    def test_anonymous_may_see_forms(self):
        self.gate.gate_auth_pages(RequestContext(path="/users/signin"), "signin")
