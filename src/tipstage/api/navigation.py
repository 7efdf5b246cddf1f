"""Navigation API endpoint."""

from aiohttp import web

from tipstage.app_keys import site_loader_key
from tipstage.core.navigation import build_navigation, navigation_to_dict


def create_navigation_routes() -> list[web.RouteDef]:
    return [web.get("/api/navigation", get_navigation)]


async def get_navigation(request: web.Request) -> web.Response:
    build = request.app[site_loader_key].load()
    return web.json_response(navigation_to_dict(build_navigation(build.index)))
