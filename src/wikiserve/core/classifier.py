"""Filesystem classification of resolved paths."""

import os
import stat
from pathlib import Path

from wikiserve.core.errors import NotFound, PermissionDenied, StatError
from wikiserve.core.types import FileKind
from wikiserve.log import TRACE, Component, get_logger

logger = get_logger(Component.CLASSIFIER)


def classify(path: Path) -> FileKind:
    """Classify a path with a single stat call.

    Symbolic links are followed, so a link to a directory is a directory.

    Args:
        path: Resolved filesystem path

    Returns:
        FileKind of the path

    Raises:
        NotFound: If the path does not exist
        PermissionDenied: If the path may not be inspected
        StatError: For any other OS-level failure
    """
    try:
        mode = os.stat(path).st_mode
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFound(f"can not stat path {path}") from e
    except PermissionError as e:
        raise PermissionDenied(f"can not stat path {path}") from e
    except OSError as e:
        raise StatError(f"can not stat path {path}") from e

    if stat.S_ISDIR(mode):
        kind = FileKind.DIRECTORY
    elif stat.S_ISREG(mode):
        kind = FileKind.REGULAR_FILE
    else:
        kind = FileKind.OTHER

    logger.log(TRACE, f"Filetype: {kind.value}")
    return kind
