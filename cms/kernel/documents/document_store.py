"""
Document Store - create, read, update, delete, list and duplicate documents.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional

from cms.kernel.documents.filename_policy import FilenamePolicy
from cms.kernel.documents.paths import PathResolver, StorageRoot
from cms.kernel.documents.revision_engine import RevisionEngine
from cms.kernel.errors import DuplicateName, IOFailure, NotFound
from cms.kernel.locking import KeyedLock, document_locks
from cms.logging_config import get_logger

logger = get_logger(__name__)


def _atomic_write_bytes(path: Path, content: bytes) -> None:
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_bytes(content)
    os.replace(tmp, path)


class DocumentStore:
    """
    File-backed document store.

    Each document is a flat file under the root chosen by the resolver.
    Per-document locks (keyed by absolute path) serialize archive and
    overwrite of one document; a per-directory lock serializes name
    allocation for create and duplicate.
    """

    def __init__(
        self,
        resolver: PathResolver,
        revisions: Optional[RevisionEngine] = None,
        locks: KeyedLock = document_locks,
    ):
        self.resolver = resolver
        self.locks = locks
        self.revisions = revisions or RevisionEngine(resolver, locks)

    def list(self, root: StorageRoot = StorageRoot.DOCUMENTS) -> List[str]:
        """Names of the regular files directly under ``root``, sorted."""
        directory = self.resolver.directory(root)
        if not directory.is_dir():
            return []
        return sorted(
            entry.name
            for entry in directory.iterdir()
            if entry.is_file() and not entry.name.startswith(".")
        )

    def exists(self, name: str) -> bool:
        try:
            return self.resolver.locate(name).is_file()
        except NotFound:
            return False

    def read(self, name: str) -> bytes:
        path = self.resolver.locate(name)
        if not path.is_file():
            raise NotFound(f"{name} does not exist.")
        return path.read_bytes()

    def create(self, name: str, content: bytes = b"") -> None:
        """
        Write a new document. Validation is the caller's job.

        Raises:
            DuplicateName: a file of that name appeared since validation
            IOFailure: the write failed
        """
        path = self.resolver.locate(name)
        with self.locks.hold(str(path.parent)):
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "xb") as fh:
                    fh.write(content)
            except FileExistsError as e:
                raise DuplicateName(f"{name} already exists.", name=name) from e
            except OSError as e:
                raise IOFailure(f"Could not create {name}.") from e
        logger.info("Document created", extra={"document": name, "size": len(content)})

    def update(self, name: str, content: bytes) -> Optional[int]:
        """
        Archive the current content, then overwrite it.

        Returns:
            The revision number the old content was archived as, or None
            when ``content`` equals the live content (nothing changes)
        """
        path = self.resolver.locate(name)
        with self.locks.hold(str(path)):
            current = self.read(name)
            if current == content:
                return None
            number = self.revisions.archive(name)
            try:
                _atomic_write_bytes(path, content)
            except OSError as e:
                raise IOFailure(f"Could not save {name}.") from e
        logger.info("Document updated", extra={"document": name, "revision": number})
        return number

    def delete(self, name: str) -> None:
        """Remove the document and its whole revision history."""
        path = self.resolver.locate(name)
        with self.locks.hold(str(path)):
            if not path.is_file():
                raise NotFound(f"{name} does not exist.")
            try:
                path.unlink()
                self.revisions.purge(name)
            except OSError as e:
                raise IOFailure(f"Could not delete {name}.") from e
        logger.info("Document deleted", extra={"document": name})

    def duplicate(self, name: str) -> str:
        """Copy the current content (not its history) to a fresh name."""
        source = self.resolver.locate(name)
        root = self.resolver.root_for(name)
        with self.locks.hold(str(source.parent)):
            with self.locks.hold(str(source)):
                if not source.is_file():
                    raise NotFound(f"{name} does not exist.")
                new_name = FilenamePolicy.next_duplicate_name(name, self.list(root))
                target = source.parent / new_name
                try:
                    shutil.copyfile(source, target)
                except OSError as e:
                    raise IOFailure(f"Could not duplicate {name}.") from e
        logger.info("Document duplicated", extra={"document": name, "copy": new_name})
        return new_name
