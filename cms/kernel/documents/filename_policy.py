"""
Filename policy: which new names are acceptable, and what a copy is called.
"""

import re
from typing import AbstractSet, Iterable

from cms.config import DOCUMENT_EXTENSIONS
from cms.kernel.documents.paths import split_extension
from cms.kernel.errors import DuplicateName, InvalidExtension, InvalidName


class FilenamePolicy:
    """
    Validates names on creation and synthesizes names for duplicates.

    Checks run in a fixed order (shape, extension, uniqueness) so the
    error raised always names the first rule the candidate breaks.
    """

    # token '.' extension, no path separators, extension of two or more chars
    NAME_PATTERN = re.compile(r'^[A-Za-z0-9_-]+\.[A-Za-z0-9]{2,}$')

    # stem split into base and trailing copy number
    COPY_PATTERN = re.compile(r'^(.*?)(\d*)$')

    def __init__(self, allowed_extensions: AbstractSet[str] = DOCUMENT_EXTENSIONS):
        self.allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)

    def validate_new_name(self, name: str, existing_names: Iterable[str]) -> str:
        """
        Check a candidate name for a new document.

        Returns:
            The name, stripped of surrounding whitespace

        Raises:
            InvalidName: name is not ``token.ext``
            InvalidExtension: extension not in the allow-list
            DuplicateName: name already in ``existing_names``
        """
        name = (name or "").strip()
        if not self.NAME_PATTERN.match(name):
            raise InvalidName(
                "A name is required, with a base and an extension (e.g. notes.txt).",
                name=name,
            )

        ext = split_extension(name)[1].lower()
        if ext not in self.allowed_extensions:
            allowed = ", ".join(f".{e}" for e in sorted(self.allowed_extensions))
            raise InvalidExtension(
                f"Unsupported file extension .{ext} (allowed: {allowed}).",
                name=name,
            )

        if name in set(existing_names):
            raise DuplicateName(f"{name} already exists.", name=name)

        return name

    @classmethod
    def next_duplicate_name(cls, original_name: str, existing_names: Iterable[str]) -> str:
        """
        Name for a copy of ``original_name`` that collides with nothing.

        The copy number starts above both the original's own trailing
        number and the highest number already used by a sibling copy
        (same base, same extension), so ``doc.txt`` next to ``doc2.txt``
        becomes ``doc3.txt``. Candidates are then tried upwards until one
        is free.
        """
        existing = set(existing_names)
        stem, ext = split_extension(original_name)
        suffix = f".{ext}" if ext else ""
        base, digits = cls.COPY_PATTERN.match(stem).groups()

        number = int(digits) if digits else 0
        sibling = re.compile(re.escape(base) + r'(\d+)' + re.escape(suffix) + '$')
        for name in existing:
            match = sibling.match(name)
            if match:
                number = max(number, int(match.group(1)))

        while True:
            number += 1
            candidate = f"{base}{number}{suffix}"
            if candidate not in existing:
                return candidate
