"""Diagnostics API endpoint.

Reports skipped documents and broken cross-references of a fresh build.
"""

from aiohttp import web

from tipstage.app_keys import site_loader_key


def create_diagnostics_routes() -> list[web.RouteDef]:
    return [web.get("/api/diagnostics", get_diagnostics)]


async def get_diagnostics(request: web.Request) -> web.Response:
    build = request.app[site_loader_key].load()
    return web.json_response(
        {
            "ok": build.ok,
            "malformed": [e.to_dict() for e in build.errors],
            "broken_references": [b.to_dict() for b in build.broken_references],
        },
    )
