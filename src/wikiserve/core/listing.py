"""HTML listings of page directories."""

import html
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from wikiserve.core.errors import DirectoryReadError
from wikiserve.log import Component, get_logger

logger = get_logger(Component.LISTING)

_HEADER = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
"""

_FOOTER = """</body>
</html>
"""


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory child with the URL it is served under."""

    name: str
    href: str


def child_href(request_path: str, name: str) -> str:
    """Build the percent-encoded URL of a directory child.

    Args:
        request_path: URL path of the directory (e.g., "/pages/notes/")
        name: Child name as returned by the filesystem

    Returns:
        Cleaned, percent-encoded URL path
    """
    joined = posixpath.normpath(f"{request_path}/{name}")
    # normpath keeps a leading "//" as-is
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    # undecodable bytes come back from the filesystem as surrogates
    return quote(joined, safe="/", errors="surrogateescape")


def display_name(name: str) -> str:
    """Make a filesystem name printable as UTF-8 text.

    Bytes that are not valid UTF-8 are shown as replacement characters.
    """
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def list_directory(directory: Path, request_path: str) -> list[DirectoryEntry]:
    """List the immediate children of a directory, sorted by name.

    Args:
        directory: Resolved directory path
        request_path: URL path the directory was requested under

    Returns:
        One DirectoryEntry per child

    Raises:
        DirectoryReadError: If the directory can not be enumerated
    """
    try:
        with os.scandir(directory) as it:
            names = sorted(entry.name for entry in it)
    except OSError as e:
        raise DirectoryReadError(f"can not read from directory {directory}") from e

    logger.debug(f"Listing {len(names)} entries of {directory}")

    return [DirectoryEntry(name=name, href=child_href(request_path, name)) for name in names]


def render_listing(directory: Path, request_path: str) -> str:
    """Render a directory as a minimal HTML page of links.

    Args:
        directory: Resolved directory path
        request_path: URL path the directory was requested under

    Returns:
        HTML document
    """
    entries = list_directory(directory, request_path)

    parts = [_HEADER.format(title=html.escape(display_name(request_path)))]
    for entry in entries:
        text = html.escape(display_name(entry.name), quote=False)
        parts.append(f'<a href="{entry.href}">{text}</a><br>\n')
    parts.append(_FOOTER)
    return "".join(parts)
