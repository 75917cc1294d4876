"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# Extensions accepted by the create form (plain text and markdown documents)
DOCUMENT_EXTENSIONS = frozenset({"txt", "md"})

# Extensions accepted by the upload form, stored under the upload root
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "svg"})

# Second path segments that require a signed-in session
RESTRICTED_ACTIONS = frozenset({
    "new",
    "create",
    "delete",
    "duplicate",
    "edit",
    "signout",
    "upload",
})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Storage
    storage_root: str = "."
    
    # Sessions
    secret_key: str = "change-this-in-production-minimum-32-characters-long"
    session_cookie: str = "cms_session"
    session_max_age: int = 14 * 24 * 60 * 60  # 14 days
    
    # Application
    debug: bool = False
    environment: str = "development"  # development, production, test
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    
    project_name: str = "File CMS"
    version: str = "1.0.0"
    
    @property
    def is_test(self) -> bool:
        return self.environment == "test"
    
    @property
    def _base(self) -> Path:
        # Test mode gets a parallel tree so fixtures never touch real data
        root = Path(self.storage_root).resolve()
        return root / "tests" if self.is_test else root
    
    @property
    def documents_root(self) -> Path:
        return self._base / "data"
    
    @property
    def uploads_root(self) -> Path:
        return self._base / "uploads"
    
    @property
    def credentials_path(self) -> Path:
        return self._base / "users.yml"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
