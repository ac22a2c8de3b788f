"""Device routes."""

from typing import Any

from aiohttp import web

from .keys import SERVER_KEY
from .middleware import create_error_response


def setup_device_routes(app: web.Application) -> None:
    """Register device routes."""
    app.router.add_get("/", root_handler)
    app.router.add_get("/devices", list_devices_handler)
    app.router.add_get("/devices/{device_id}", get_device_handler)
    app.router.add_post("/devices/{device_id}", transition_handler)


async def root_handler(request: web.Request) -> web.Response:
    """GET / - Server name and its devices."""
    server = request.app[SERVER_KEY]
    return web.json_response({
        "name": server.server_name,
        "devices": [device.to_dict() for device in server.devices],
    })


async def list_devices_handler(request: web.Request) -> web.Response:
    """GET /devices - List live devices."""
    server = request.app[SERVER_KEY]
    return web.json_response([device.to_dict() for device in server.devices])


async def get_device_handler(request: web.Request) -> web.Response:
    """GET /devices/{device_id} - One device with its available actions."""
    server = request.app[SERVER_KEY]
    device = server.get_device(request.match_info["device_id"])
    return web.json_response(device.to_dict())


async def transition_handler(request: web.Request) -> web.Response:
    """POST /devices/{device_id} - Run the transition named by ``action``.

    Accepts a JSON body or form fields, e.g. ``action=turn-on``.
    """
    server = request.app[SERVER_KEY]
    device = server.get_device(request.match_info["device_id"])

    body = await _read_body(request)
    if isinstance(body, web.Response):
        return body

    action = body.get("action")
    if not action or not isinstance(action, str):
        return create_error_response("MISSING_ACTION", "Request must name an 'action'", status=400)

    await device.call(action)
    return web.json_response(device.to_dict())


async def _read_body(request: web.Request) -> dict[str, Any] | web.Response:
    """Request fields, or the 400 response explaining why there are none."""
    if request.content_type == "application/json":
        try:
            body = await request.json()
        except ValueError:
            return create_error_response("INVALID_BODY", "Request body must be valid JSON", status=400)
        if not isinstance(body, dict):
            return create_error_response(
                "BODY_NOT_OBJECT", "Request body must be a JSON object, e.g. {\"action\": \"turn-on\"}", status=400
            )
        return body
    if not request.can_read_body:
        return {}
    return dict(await request.post())
