"""Tests for server module."""

from wikiserve.app_keys import config_key, dispatcher_key, resolver_key
from wikiserve.config import Config
from wikiserve.server import create_app, create_dispatcher


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(self, test_config: Config) -> None:
        """Create app with valid configuration."""
        app = create_app(test_config)

        assert config_key in app
        assert resolver_key in app
        assert dispatcher_key in app
        assert app[config_key] is test_config
        assert app[resolver_key].content_root == test_config.pages.content_dir
        assert app[resolver_key].prefix == "/pages"

    def test__routes__mounted_under_pages_folder(self, test_config: Config) -> None:
        """Register the root redirect and the pages mount."""
        app = create_app(test_config)

        resources = {r.canonical for r in app.router.resources()}
        assert "/" in resources
        assert "/pages/{path}" in resources
        assert "/pages" in resources


class TestCreateDispatcher:
    """Tests for create_dispatcher()."""

    def test__configured_extensions__get_renderers(self, test_config: Config) -> None:
        """Create one renderer per configured extension."""
        dispatcher = create_dispatcher(test_config)

        assert dispatcher.extensions == frozenset({".asciidoc", ".broken"})
