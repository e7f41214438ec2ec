"""aiohttp server for wikiserve.

Application factory and route registration.
"""

from aiohttp import web

from wikiserve.api.pages import create_pages_routes
from wikiserve.app_keys import config_key, dispatcher_key, resolver_key
from wikiserve.config import Config
from wikiserve.core.dispatch import ContentDispatcher
from wikiserve.core.renderer import ExternalRenderer
from wikiserve.core.resolver import PathResolver
from wikiserve.log import NOTICE, Component, get_logger

logger = get_logger(Component.SERVER)


def create_dispatcher(config: Config) -> ContentDispatcher:
    renderers = {
        extension: ExternalRenderer(command, timeout=config.render.timeout)
        for extension, command in config.render.extensions.items()
    }
    return ContentDispatcher(renderers)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[config_key] = config
    app[resolver_key] = PathResolver(config.pages.content_dir, config.pages.mount)
    app[dispatcher_key] = create_dispatcher(config)

    app.router.add_routes(create_pages_routes(config.pages.mount))

    return app


def run_server(config: Config) -> None:
    """Run the server until interrupted.

    Args:
        config: Application configuration

    Raises:
        OSError: If the server can not listen on the configured binding
    """
    app = create_app(config)
    host, port = config.server.address()

    logger.log(NOTICE, f"Listening on {config.server.binding}")
    logger.info(f"Serving {config.pages.content_dir} under {config.pages.mount}/")
    web.run_app(
        app,
        host=host,
        port=port,
        handler_cancellation=config.server.cancel_on_disconnect,
        print=None,
    )
