"""
Access gate: which request paths need a signed-in session.
"""

from enum import Enum
from typing import AbstractSet

from cms.config import RESTRICTED_ACTIONS
from cms.kernel.context import RequestContext
from cms.kernel.errors import AlreadySignedIn, Unauthorized
from cms.logging_config import get_logger

logger = get_logger(__name__)


class AccessLevel(str, Enum):
    PUBLIC = "public"
    RESTRICTED = "restricted"


# Pages that make no sense once signed in
AUTH_PAGES = frozenset({"signin", "signup"})


class AccessGate:
    """
    Classifies paths by their second segment and enforces sign-in.

    ``/files/new``, ``/about.md/edit``, ``/files/delete/x`` and
    ``/users/signout`` are restricted; ``/about.md`` and
    ``/about.md/revisions`` are public.
    """

    def __init__(self, restricted_actions: AbstractSet[str] = RESTRICTED_ACTIONS):
        self.restricted_actions = frozenset(restricted_actions)

    @staticmethod
    def action_of(path: str) -> str:
        segments = path.split("/")
        return segments[2] if len(segments) > 2 else ""

    def classify(self, path: str) -> AccessLevel:
        if self.action_of(path) in self.restricted_actions:
            return AccessLevel.RESTRICTED
        return AccessLevel.PUBLIC

    def authorize(self, ctx: RequestContext, path: str) -> None:
        """
        Raises:
            Unauthorized: restricted path and the session is anonymous
        """
        if self.classify(path) is AccessLevel.RESTRICTED and not ctx.is_signed_in:
            logger.info("Restricted path refused", extra={"path": path})
            raise Unauthorized("You must be signed in to do that.")

    def gate_auth_pages(self, ctx: RequestContext, action: str) -> None:
        """
        Raises:
            AlreadySignedIn: sign-in/sign-up requested by a signed-in session
        """
        if action in AUTH_PAGES and ctx.is_signed_in:
            raise AlreadySignedIn("You are already signed in.")
