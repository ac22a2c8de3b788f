"""Typed application keys."""

from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from boneled.framework.server import DeviceServer

SERVER_KEY: web.AppKey["DeviceServer"] = web.AppKey("server")
