"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from wikiserve.config import Config, LoggingConfig, PagesConfig, RenderConfig, ServerConfig
from wikiserve.log import ROOT_LOGGER

from tests.commands import FAILING_RENDERER, UPPERCASE_RENDERER


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    """Create the pages folder under tmp_path."""
    pages = tmp_path / "pages"
    pages.mkdir(exist_ok=True)
    return pages


@pytest.fixture
def test_config(tmp_path: Path, pages_dir: Path) -> Config:
    """Create a test configuration serving tmp_path/pages.

    .asciidoc files are rendered by a renderer that uppercases its input,
    .broken files by one that always fails.
    """
    return Config(
        server=ServerConfig(binding="127.0.0.1:0"),
        pages=PagesConfig(folder="pages", root_dir=tmp_path),
        logging=LoggingConfig(level="debug"),
        render=RenderConfig(
            extensions={
                ".asciidoc": UPPERCASE_RENDERER,
                ".broken": FAILING_RENDERER,
            },
            timeout=10.0,
        ),
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by configure_logging() during a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
