"""Request path to filesystem path resolution.

Pure path algebra: nothing here touches the filesystem, so a rejected path
never reaches a stat or open call.
"""

import os
import posixpath
from pathlib import Path

from wikiserve.core.errors import PathResolutionError, PathTraversal
from wikiserve.core.types import URLPath


class PathResolver:
    """Maps request paths under a URL mount onto a content directory.

    The mount prefix (e.g., "/pages") is stripped, the remainder is lexically
    cleaned and joined onto the content root. Results that leave the content
    root are rejected.
    """

    def __init__(self, content_root: Path, prefix: str) -> None:
        """Initialize resolver.

        Args:
            content_root: Directory that all resolved paths must stay within
            prefix: URL mount prefix consumed by the router (e.g., "/pages")
        """
        self._content_root = Path(os.path.abspath(content_root))
        self._prefix = "/" + prefix.strip("/")

    @property
    def content_root(self) -> Path:
        return self._content_root

    @property
    def prefix(self) -> str:
        return self._prefix

    def resolve(self, request_path: URLPath | str) -> Path:
        """Resolve a request path to a confined filesystem path.

        Args:
            request_path: Decoded URL path, e.g. "/pages/notes/today.asciidoc"

        Returns:
            Absolute path inside the content root

        Raises:
            PathResolutionError: If the path is not under the mount prefix
            PathTraversal: If the cleaned path escapes the content root
        """
        if "\x00" in request_path:
            raise PathResolutionError(f"Request path contains a NUL byte: {request_path!r}")

        relative = self._strip_prefix(request_path)
        cleaned = posixpath.normpath(relative) if relative else "."

        if cleaned == ".." or cleaned.startswith("../"):
            raise PathTraversal(f"Request path escapes the content root: {request_path}")

        candidate = os.path.abspath(os.path.join(self._content_root, cleaned))
        root = str(self._content_root)
        if os.path.commonpath([root, candidate]) != root:
            raise PathTraversal(f"Request path escapes the content root: {request_path}")

        return Path(candidate)

    def _strip_prefix(self, request_path: str) -> str:
        if request_path == self._prefix:
            return ""
        if not request_path.startswith(self._prefix + "/"):
            raise PathResolutionError(
                f"Request path {request_path!r} is not under {self._prefix!r}"
            )
        return request_path[len(self._prefix) :].lstrip("/")
