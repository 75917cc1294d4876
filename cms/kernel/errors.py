"""
CMS error hierarchy.

Hierarchy:
    CMSError
    ├── NotFound             - document or revision absent
    ├── Unauthorized         - restricted action without a signed-in session
    ├── AlreadySignedIn      - sign-in/sign-up page requested while signed in
    ├── PolicyViolation      - rejected by the filename policy
    │   ├── InvalidName
    │   ├── InvalidExtension
    │   └── DuplicateName
    ├── CredentialError      - rejected by sign-in/sign-up checks
    │   ├── InvalidCredentials
    │   ├── InvalidUsername
    │   └── InvalidPassword
    │       └── PasswordMismatch
    └── IOFailure            - underlying storage error

NotFound, Unauthorized and AlreadySignedIn become a redirect plus flash at
the HTTP boundary. Policy and credential errors are shown on the form that
caused them. IOFailure is a failed request.
"""

from typing import Any, Dict


class CMSError(Exception):
    """Base error; ``message`` is safe to show to the user."""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: Dict[str, Any] = context
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class NotFound(CMSError):
    pass


class Unauthorized(CMSError):
    pass


class AlreadySignedIn(CMSError):
    pass


class PolicyViolation(CMSError):
    pass


class InvalidName(PolicyViolation):
    pass


class InvalidExtension(PolicyViolation):
    pass


class DuplicateName(PolicyViolation):
    pass


class CredentialError(CMSError):
    pass


class InvalidCredentials(CredentialError):
    pass


class InvalidUsername(CredentialError):
    pass


class InvalidPassword(CredentialError):
    pass


class PasswordMismatch(InvalidPassword):
    pass


class IOFailure(CMSError):
    pass
