"""Extension-based content dispatch.

Files whose extension has a configured renderer are piped through it; all
other files are served byte for byte.
"""

import io
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from wikiserve.core.errors import CopyError, FileOpenError, RenderError
from wikiserve.core.renderer import ExternalRenderer
from wikiserve.log import TRACE, Component, get_logger

logger = get_logger(Component.DISPATCH)

RENDERED_CONTENT_TYPE = "text/html"


@dataclass(frozen=True)
class RenderedContent:
    """Response body for a regular file.

    content_type is None for passthrough files, leaving the choice to the
    transport default.
    """

    body: bytes
    content_type: str | None = None


class ContentDispatcher:
    """Chooses between passthrough and external rendering per file."""

    def __init__(self, renderers: Mapping[str, ExternalRenderer]) -> None:
        """Initialize dispatcher.

        Args:
            renderers: Renderer per file extension (case-sensitive, with dot)
        """
        self._renderers = dict(renderers)

    @property
    def extensions(self) -> frozenset[str]:
        return frozenset(self._renderers)

    def renderer_for(self, path: Path) -> ExternalRenderer | None:
        return self._renderers.get(path.suffix)

    async def dispatch(self, path: Path) -> RenderedContent:
        """Produce the response body for a regular file.

        The file is closed on every exit path.

        Args:
            path: Resolved path of a regular file

        Returns:
            RenderedContent with the body bytes

        Raises:
            FileOpenError: If the file can not be opened
            CopyError: If a passthrough file can not be read
            RenderError: If the external renderer fails
        """
        renderer = self.renderer_for(path)
        logger.log(TRACE, f"Filepath extension: {path.suffix!r}")

        try:
            file = path.open("rb")
        except OSError as e:
            raise FileOpenError(f"can not open file {path} for reading") from e

        with file:
            if renderer is None:
                buffer = io.BytesIO()
                try:
                    shutil.copyfileobj(file, buffer)
                except OSError as e:
                    raise CopyError("can not copy file to response") from e
                return RenderedContent(body=buffer.getvalue())

            try:
                body = await renderer.render(file)
            except RenderError as e:
                e.add_note(f"can not format file with {renderer.name}")
                raise
            return RenderedContent(body=body, content_type=RENDERED_CONTENT_TYPE)
