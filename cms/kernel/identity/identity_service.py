"""
Identity service for sign-up, sign-in and sign-out.
"""

import re
from typing import Optional

from cms.kernel.context import RequestContext
from cms.kernel.errors import (
    InvalidCredentials,
    InvalidPassword,
    InvalidUsername,
    PasswordMismatch,
)
from cms.kernel.identity.credential_store import CredentialStore
from cms.kernel.identity.password import PasswordHasher
from cms.logging_config import get_logger, username_var

logger = get_logger(__name__)

MIN_USERNAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 4

_NON_WORD = re.compile(r"\W")
_WORD = re.compile(r"\w")


class IdentityService:
    """
    Service for user identity operations.

    Moves a session between anonymous and signed-in; the only other
    state it touches is the credential store.
    """

    def __init__(self, credentials: CredentialStore, hasher: Optional[PasswordHasher] = None):
        self.credentials = credentials
        self.hasher = hasher or PasswordHasher()

    def check_username(self, username: str) -> None:
        """
        Raises:
            InvalidUsername: too short, has non-word characters, or taken
        """
        if len(username) < MIN_USERNAME_LENGTH or _NON_WORD.search(username):
            raise InvalidUsername(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters "
                "of letters, digits or underscores."
            )
        if self.credentials.exists(username):
            raise InvalidUsername(f"{username} is already taken.")

    def check_password(self, password: str, confirmation: str) -> None:
        """
        Raises:
            InvalidPassword: too short or without any word character
            PasswordMismatch: confirmation differs
        """
        if len(password) < MIN_PASSWORD_LENGTH or not _WORD.search(password):
            raise InvalidPassword(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters "
                "and include a letter or digit."
            )
        if password != confirmation:
            raise PasswordMismatch("Passwords do not match.")

    def sign_up(
        self,
        ctx: RequestContext,
        username: str,
        password: str,
        confirmation: str,
    ) -> None:
        """
        Create a credential record and sign the session in.

        Nothing is stored unless every check passes.
        """
        username = username.strip()
        self.check_username(username)
        self.check_password(password, confirmation)

        self.credentials.add(username, self.hasher.hash(password))
        ctx.sign_in(username)
        username_var.set(username)
        logger.info("User signed up", extra={"user": username})

    def sign_in(self, ctx: RequestContext, username: str, password: str) -> None:
        """
        Bind the session to ``username`` if the password checks out.

        Raises:
            InvalidCredentials: unknown user or wrong password (same message)
        """
        username = username.strip()
        stored = self.credentials.get(username)
        if stored is None or not self.hasher.verify(password, stored):
            logger.warning("Sign-in failed", extra={"user": username})
            raise InvalidCredentials("Invalid credentials.")

        if self.hasher.needs_rehash(stored):
            self.credentials.put(username, self.hasher.hash(password))

        ctx.sign_in(username)
        username_var.set(username)
        logger.info("User signed in", extra={"user": username})

    def sign_out(self, ctx: RequestContext) -> None:
        username = ctx.username
        ctx.sign_out()
        logger.info("User signed out", extra={"user": username})
