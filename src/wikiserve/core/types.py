"""Core type definitions."""

from enum import Enum
from typing import NewType

# Decoded URL path of a request (e.g., "/pages/notes/today.asciidoc")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


class FileKind(Enum):
    """Filesystem classification of a resolved path."""

    DIRECTORY = "directory"
    REGULAR_FILE = "file"
    OTHER = "other"
