"""
Document Core - files, filename policy and revision history.
"""

from cms.kernel.documents.paths import ContentKind, PathResolver, StorageRoot, content_kind
from cms.kernel.documents.filename_policy import FilenamePolicy
from cms.kernel.documents.revision_engine import RevisionEngine, revision_dir_name
from cms.kernel.documents.document_store import DocumentStore

__all__ = [
    "ContentKind",
    "PathResolver",
    "StorageRoot",
    "content_kind",
    "FilenamePolicy",
    "RevisionEngine",
    "revision_dir_name",
    "DocumentStore",
]
