"""Application keys for type-safe app configuration access."""

from aiohttp import web

from wikiserve.config import Config
from wikiserve.core.dispatch import ContentDispatcher
from wikiserve.core.resolver import PathResolver

config_key = web.AppKey("config", Config)
resolver_key = web.AppKey("resolver", PathResolver)
dispatcher_key = web.AppKey("dispatcher", ContentDispatcher)
