"""
Path resolution for documents and uploads.
"""

from enum import Enum
from pathlib import Path

from cms.config import IMAGE_EXTENSIONS
from cms.kernel.errors import NotFound


class ContentKind(str, Enum):
    """How a document's bytes are interpreted, decided by its extension."""
    TEXT = "text"
    MARKDOWN = "markdown"
    BINARY = "binary"


class StorageRoot(str, Enum):
    DOCUMENTS = "documents"
    UPLOADS = "uploads"


def split_extension(name: str) -> tuple[str, str]:
    """Split on the last '.'; ``("v1.2", "txt")`` for ``"v1.2.txt"``."""
    stem, sep, ext = name.rpartition(".")
    if not sep:
        return name, ""
    return stem, ext


def content_kind(name: str) -> ContentKind:
    ext = split_extension(name)[1].lower()
    if ext == "md":
        return ContentKind.MARKDOWN
    if ext in IMAGE_EXTENSIONS:
        return ContentKind.BINARY
    return ContentKind.TEXT


class PathResolver:
    """Maps a document name to its file under the document or upload root."""

    def __init__(self, documents_root: Path, uploads_root: Path):
        self.documents_root = Path(documents_root)
        self.uploads_root = Path(uploads_root)

    def root_for(self, name: str) -> StorageRoot:
        if content_kind(name) is ContentKind.BINARY:
            return StorageRoot.UPLOADS
        return StorageRoot.DOCUMENTS

    def directory(self, root: StorageRoot) -> Path:
        return self.uploads_root if root is StorageRoot.UPLOADS else self.documents_root

    def locate(self, name: str) -> Path:
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise NotFound(f"{name} does not exist.")
        return self.directory(self.root_for(name)) / name
