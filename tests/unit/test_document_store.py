"""Unit tests for the document store."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from cms.kernel.documents import StorageRoot
from cms.kernel.errors import DuplicateName, IOFailure, NotFound


class TestDocumentStore:
    """Tests for DocumentStore."""

    def test_create_then_list(self, store):
        store.create("notes.txt")
        store.create("about.md", b"# Hi")

        assert store.list() == ["about.md", "notes.txt"]
        assert store.read("notes.txt") == b""

    def test_create_existing_name(self, store):
        store.create("notes.txt", b"a")
        with pytest.raises(DuplicateName):
            store.create("notes.txt", b"b")
        assert store.read("notes.txt") == b"a"

    def test_list_excludes_revision_directories(self, store):
        store.create("notes.txt", b"a")
        store.update("notes.txt", b"b")
        assert store.list() == ["notes.txt"]

    def test_list_empty_root(self, store):
        assert store.list() == []
        assert store.list(StorageRoot.UPLOADS) == []

    def test_images_go_to_upload_root(self, store, settings):
        store.create("photo.png", b"\x89PNG")
        assert (settings.uploads_root / "photo.png").is_file()
        assert store.list(StorageRoot.UPLOADS) == ["photo.png"]
        assert store.list(StorageRoot.DOCUMENTS) == []

    def test_read_missing(self, store):
        with pytest.raises(NotFound) as exc:
            store.read("ghost.txt")
        assert exc.value.message == "ghost.txt does not exist."

    def test_read_rejects_path_traversal(self, store):
        with pytest.raises(NotFound):
            store.read("../users.yml")

    def test_update_archives_previous_content(self, store, revisions):
        """create v1, edit to v2, edit to v3."""
        store.create("about.md", b"v1")
        assert store.update("about.md", b"v2") == 1
        assert store.update("about.md", b"v3") == 2

        assert store.read("about.md") == b"v3"
        assert revisions.list_revisions("about.md") == [1, 2]
        assert revisions.read_revision("about.md", 1) == b"v1"
        assert revisions.read_revision("about.md", 2) == b"v2"

    def test_update_with_same_content_is_a_no_op(self, store, revisions):
        store.create("notes.txt", b"same")
        assert store.update("notes.txt", b"same") is None
        assert revisions.list_revisions("notes.txt") == []

    def test_update_missing(self, store):
        with pytest.raises(NotFound):
            store.update("ghost.txt", b"x")

    def test_failed_archive_leaves_document_untouched(self, store, settings):
        store.create("notes.txt", b"original")
        (settings.documents_root / "notestxt").write_bytes(b"")

        with pytest.raises(IOFailure):
            store.update("notes.txt", b"changed")
        assert store.read("notes.txt") == b"original"

    def test_delete_removes_document_and_history(self, store, revisions, settings):
        store.create("notes.txt", b"a")
        store.update("notes.txt", b"b")

        store.delete("notes.txt")

        assert "notes.txt" not in store.list()
        assert not (settings.documents_root / "notestxt").exists()
        assert revisions.list_revisions("notes.txt") == []

    def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            store.delete("ghost.txt")

    def test_duplicate_copies_content_not_history(self, store, revisions):
        store.create("doc.txt", b"a")
        store.update("doc.txt", b"b")

        new_name = store.duplicate("doc.txt")

        assert new_name == "doc1.txt"
        assert store.read("doc1.txt") == b"b"
        assert revisions.list_revisions("doc1.txt") == []

    def test_duplicate_respects_highest_copy(self, store):
        store.create("doc.txt", b"a")
        store.create("doc2.txt", b"b")
        assert store.duplicate("doc.txt") == "doc3.txt"

    def test_duplicate_missing(self, store):
        with pytest.raises(NotFound):
            store.duplicate("ghost.txt")

    def test_concurrent_updates_keep_history_contiguous(self, store, revisions):
        store.create("shared.txt", b"initial")
        contents = [f"edit {i}".encode() for i in range(16)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda c: store.update("shared.txt", c), contents))

        numbers = revisions.list_revisions("shared.txt")
        assert numbers == list(range(1, 17))
        archived = [revisions.read_revision("shared.txt", n) for n in numbers]
        # Every value that was ever live appears exactly once in history or as current
        assert sorted(archived + [store.read("shared.txt")]) == sorted(contents + [b"initial"])

    def test_concurrent_duplicates_get_distinct_names(self, store):
        store.create("doc.txt", b"a")
        with ThreadPoolExecutor(max_workers=8) as pool:
            names = list(pool.map(lambda _: store.duplicate("doc.txt"), range(8)))
        assert len(set(names)) == 8
        assert sorted(store.list()) == sorted(["doc.txt"] + names)
