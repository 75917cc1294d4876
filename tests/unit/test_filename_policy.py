"""Unit tests for the filename policy."""

import pytest

from cms.config import IMAGE_EXTENSIONS
from cms.kernel.documents import FilenamePolicy
from cms.kernel.errors import DuplicateName, InvalidExtension, InvalidName


class TestValidateNewName:
    """Tests for FilenamePolicy.validate_new_name."""

    policy = FilenamePolicy()

    def test_accepts_text_and_markdown(self):
        assert self.policy.validate_new_name("notes.txt", []) == "notes.txt"
        assert self.policy.validate_new_name("read_me-2.md", ["notes.txt"]) == "read_me-2.md"

    def test_strips_surrounding_whitespace(self):
        assert self.policy.validate_new_name("  notes.txt ", []) == "notes.txt"

    @pytest.mark.parametrize("name", ["", "   ", "notes", ".txt", "notes.t", "a/b.txt", "../x.txt", "v1.2.txt"])
    def test_rejects_bad_shape(self, name):
        with pytest.raises(InvalidName):
            self.policy.validate_new_name(name, [])

    def test_rejects_extension_outside_allow_list(self):
        with pytest.raises(InvalidExtension) as exc:
            self.policy.validate_new_name("script.py", [])
        assert ".py" in exc.value.message

    def test_rejects_existing_name(self):
        with pytest.raises(DuplicateName):
            self.policy.validate_new_name("notes.txt", ["notes.txt"])

    def test_shape_is_checked_before_extension(self):
        """'x' has no extension at all: a shape error, not an extension error."""
        with pytest.raises(InvalidName):
            self.policy.validate_new_name("x", ["x"])

    def test_extension_is_checked_before_uniqueness(self):
        with pytest.raises(InvalidExtension):
            self.policy.validate_new_name("notes.py", ["notes.py"])

    def test_image_policy_uses_its_own_allow_list(self):
        images = FilenamePolicy(IMAGE_EXTENSIONS)
        assert images.validate_new_name("photo.png", []) == "photo.png"
        with pytest.raises(InvalidExtension):
            images.validate_new_name("notes.txt", [])


class TestNextDuplicateName:
    """Tests for FilenamePolicy.next_duplicate_name."""

    def test_first_copy(self):
        assert FilenamePolicy.next_duplicate_name("doc.txt", {"doc.txt"}) == "doc1.txt"

    def test_respects_highest_existing_copy(self):
        assert FilenamePolicy.next_duplicate_name("doc.txt", {"doc.txt", "doc2.txt"}) == "doc3.txt"

    def test_increments_own_trailing_number(self):
        assert FilenamePolicy.next_duplicate_name("doc7.md", {"doc7.md"}) == "doc8.md"

    def test_skips_taken_candidates(self):
        existing = {"doc1.txt", "doc2.txt", "doc3.txt"}
        assert FilenamePolicy.next_duplicate_name("doc1.txt", existing) == "doc4.txt"

    def test_other_extensions_do_not_count(self):
        existing = {"doc.txt", "doc5.md"}
        assert FilenamePolicy.next_duplicate_name("doc.txt", existing) == "doc1.txt"

    def test_result_is_never_an_existing_name(self):
        existing = {"a.txt"} | {f"a{i}.txt" for i in range(1, 50)}
        for name in list(existing):
            assert FilenamePolicy.next_duplicate_name(name, existing) not in existing

    def test_is_pure(self):
        existing = frozenset({"doc.txt", "doc2.txt"})
        first = FilenamePolicy.next_duplicate_name("doc.txt", existing)
        assert FilenamePolicy.next_duplicate_name("doc.txt", existing) == first
        assert existing == {"doc.txt", "doc2.txt"}
