"""HTTP API for the device server."""

from typing import TYPE_CHECKING

from aiohttp import web

from .keys import SERVER_KEY
from .middleware import error_handling_middleware, request_logging_middleware
from .routes import setup_device_routes

if TYPE_CHECKING:
    from boneled.framework.server import DeviceServer


def create_api_app(server: "DeviceServer") -> web.Application:
    """Create the aiohttp application for ``server``."""
    # request logging -> error handling -> route
    app = web.Application(middlewares=[request_logging_middleware, error_handling_middleware])
    app[SERVER_KEY] = server
    setup_device_routes(app)
    return app


__all__ = ["SERVER_KEY", "create_api_app"]
