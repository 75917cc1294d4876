"""
Revision Engine - append-only, numbered history of a document's prior content.

Layout, next to the live document:

    data/about.md
    data/aboutmd/1.md
    data/aboutmd/2.md

The revision directory is the document name with its last '.' removed.
Revision files are created exclusively and never rewritten.
"""

import shutil
from pathlib import Path
from typing import List

from cms.kernel.documents.paths import PathResolver, split_extension
from cms.kernel.errors import IOFailure, NotFound
from cms.kernel.locking import KeyedLock, document_locks
from cms.logging_config import get_logger

logger = get_logger(__name__)


def revision_dir_name(document_name: str) -> str:
    """``"about.md"`` -> ``"aboutmd"``; ``"v1.2.txt"`` -> ``"v1.2txt"``."""
    stem, ext = split_extension(document_name)
    return stem + ext


class RevisionEngine:
    """
    Archives a document's current content before it is overwritten.

    Callers that go on to overwrite the document must hold the document
    lock across both steps (DocumentStore.update does); archive() takes
    the same re-entrant lock so it is also safe on its own.
    """

    def __init__(self, resolver: PathResolver, locks: KeyedLock = document_locks):
        self.resolver = resolver
        self.locks = locks

    def revision_dir(self, document_name: str) -> Path:
        path = self.resolver.locate(document_name)
        return path.parent / revision_dir_name(document_name)

    def _revision_path(self, document_name: str, number: int) -> Path:
        ext = split_extension(document_name)[1]
        filename = f"{number}.{ext}" if ext else str(number)
        return self.revision_dir(document_name) / filename

    def list_revisions(self, document_name: str) -> List[int]:
        """Revision numbers in ascending order; empty if never archived."""
        directory = self.revision_dir(document_name)
        if not directory.is_dir():
            return []
        numbers = []
        for entry in directory.iterdir():
            stem = split_extension(entry.name)[0]
            if entry.is_file() and stem.isdigit():
                numbers.append(int(stem))
        return sorted(numbers)

    def archive(self, document_name: str) -> int:
        """
        Copy the live content into the next numbered revision.

        Returns:
            The new revision number

        Raises:
            NotFound: no live document to archive
            IOFailure: the snapshot could not be written; the caller
                must not overwrite the document
        """
        path = self.resolver.locate(document_name)
        with self.locks.hold(str(path)):
            if not path.is_file():
                raise NotFound(f"{document_name} does not exist.")

            number = max(self.list_revisions(document_name), default=0) + 1
            target = self._revision_path(document_name, number)
            try:
                content = path.read_bytes()
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "xb") as fh:
                    fh.write(content)
            except OSError as e:
                logger.error(
                    "Archive failed",
                    extra={"document": document_name, "revision": number, "error": str(e)},
                )
                raise IOFailure(f"Could not archive {document_name}.") from e

        logger.info("Revision archived", extra={"document": document_name, "revision": number})
        return number

    def read_revision(self, document_name: str, number: int) -> bytes:
        path = self._revision_path(document_name, number)
        if not path.is_file():
            raise NotFound(f"Revision {number} of {document_name} does not exist.")
        return path.read_bytes()

    def purge(self, document_name: str) -> None:
        """Remove the whole revision directory, if any."""
        directory = self.revision_dir(document_name)
        if directory.is_dir():
            shutil.rmtree(directory)
