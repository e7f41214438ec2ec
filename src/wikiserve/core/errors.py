"""Error taxonomy for page resolution and rendering.

Every failure in the request pipeline is a WikiError subclass. Lower layers
raise the typed error from the underlying OSError; upper layers attach context
with add_note(). The HTTP status is a property of the error kind.
"""


class WikiError(Exception):
    """Base class for request pipeline failures."""

    status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PathResolutionError(WikiError):
    """Request path could not be mapped onto the content root."""


class PathTraversal(PathResolutionError):
    """Normalized request path escapes the content root."""

    status = 403


class NotFound(WikiError):
    """Resolved path does not exist."""

    status = 404


class PermissionDenied(WikiError):
    """Resolved path exists but may not be inspected."""

    status = 403


class StatError(WikiError):
    """Metadata query failed for a reason other than absence or permissions."""


class UnsupportedFileType(WikiError):
    """Resolved path is neither a directory nor a regular file."""


class DirectoryReadError(WikiError):
    """Directory entries could not be enumerated."""


class FileOpenError(WikiError):
    """Regular file could not be opened for reading."""


class CopyError(WikiError):
    """File contents could not be copied to the response."""


class RenderError(WikiError):
    """External renderer failed.

    Carries the renderer's captured standard error, when there is any, so the
    caller can display it next to the failure note.
    """

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}: {self.stderr.strip()}"
        return self.message


def describe(error: BaseException) -> str:
    """Render the detail chain of an error as a single line.

    Notes come first (outermost context first), then the error itself, then
    each chained cause.

    Args:
        error: Exception to describe

    Returns:
        Chain text joined with ": "
    """
    parts: list[str] = []
    current: BaseException | None = error
    while current is not None:
        notes = getattr(current, "__notes__", [])
        parts.extend(reversed(notes))
        text = str(current) or type(current).__name__
        parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
