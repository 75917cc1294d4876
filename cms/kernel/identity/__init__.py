"""
Identity Core - credentials, password hashing and sign-in/sign-up.
"""

from cms.kernel.identity.password import PasswordHasher, verify_password, hash_password
from cms.kernel.identity.credential_store import CredentialStore
from cms.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "CredentialStore",
    "IdentityService",
]
