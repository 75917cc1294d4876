"""
Per-request context: who is asking, for what path, and the session's flash.
"""

from dataclasses import dataclass, field
from typing import Any, MutableMapping, Optional

SESSION_USER_KEY = "username"
SESSION_FLASH_KEY = "flash"


@dataclass
class RequestContext:
    """
    Built once per request and handed to every component that needs
    session state; nothing reads the session any other way.
    """

    path: str
    session: MutableMapping[str, Any] = field(default_factory=dict)
    referrer: Optional[str] = None

    @property
    def username(self) -> Optional[str]:
        return self.session.get(SESSION_USER_KEY)

    @property
    def is_signed_in(self) -> bool:
        return bool(self.username)

    def sign_in(self, username: str) -> None:
        self.session[SESSION_USER_KEY] = username

    def sign_out(self) -> None:
        self.session.pop(SESSION_USER_KEY, None)

    def flash(self, message: str) -> None:
        self.session[SESSION_FLASH_KEY] = message

    def take_flash(self) -> Optional[str]:
        """Return the pending flash message and clear it."""
        return self.session.pop(SESSION_FLASH_KEY, None)

    @property
    def return_path(self) -> str:
        """Where to send the user back to: the referring page, else root."""
        return self.referrer or "/"
