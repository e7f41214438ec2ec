"""Pages endpoint.

Serves the content tree: directories as link listings, renderable files
through their external renderer, everything else verbatim.
"""

import time
from pathlib import Path

from aiohttp import web

from wikiserve.app_keys import config_key, dispatcher_key, resolver_key
from wikiserve.core.classifier import classify
from wikiserve.core.errors import UnsupportedFileType, WikiError, describe
from wikiserve.core.listing import render_listing
from wikiserve.core.types import FileKind, URLPath
from wikiserve.log import NOTICE, Component, get_logger

logger = get_logger(Component.PAGES)


def create_pages_routes(mount: str) -> list[web.RouteDef]:
    return [
        web.get("/", redirect_root),
        web.get(mount, redirect_root),
        web.get(f"{mount}/{{path:.*}}", get_page),
    ]


async def redirect_root(request: web.Request) -> web.Response:
    mount = request.app[config_key].pages.mount
    raise web.HTTPMovedPermanently(location=f"{mount}/")


async def get_page(request: web.Request) -> web.Response:
    resolver = request.app[resolver_key]
    started = time.perf_counter()
    request_path = URLPath(request.path)

    target: Path | str = request_path
    try:
        try:
            target = resolver.resolve(request_path)
        finally:
            logger.log(NOTICE, f"Sending {target} to {request.remote}")
        return await _serve(request, target, request_path)
    except WikiError as e:
        return _error_response(e)
    finally:
        logger.debug(f"Sent {target} ({time.perf_counter() - started:.3f}s)")


async def _serve(request: web.Request, path: Path, request_path: URLPath) -> web.Response:
    kind = classify(path)

    if kind is FileKind.DIRECTORY:
        listing = render_listing(path, request_path)
        return web.Response(text=listing, content_type="text/html")

    if kind is FileKind.REGULAR_FILE:
        dispatcher = request.app[dispatcher_key]
        content = await dispatcher.dispatch(path)
        return web.Response(body=content.body, content_type=content.content_type)

    logger.error(f"{path} is not a directory and not a regular file")
    raise UnsupportedFileType(f"can not serve {path}: not a directory or regular file")


def _error_response(error: WikiError) -> web.Response:
    details = describe(error)
    logger.error(details)
    return web.Response(status=error.status, text=details)
