"""aiohttp preview server for Tipstage.

Application factory and route registration. Every request rebuilds the
collection from the source directory, so edits show up on reload.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web

from tipstage.api.diagnostics import create_diagnostics_routes
from tipstage.api.navigation import create_navigation_routes
from tipstage.api.pages import create_pages_routes
from tipstage.app_keys import renderer_key, site_loader_key, verbose_key
from tipstage.config import Config
from tipstage.core.errors import DuplicateId
from tipstage.core.renderer import PageRenderer
from tipstage.core.site import SiteLoader

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def build_error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Report a failed build as a JSON 500 response."""
    try:
        return await handler(request)
    except DuplicateId as e:
        return web.json_response(
            {"error": str(e), "tip_id": e.tip_id, "sources": e.sources},
            status=500,
        )


async def serve_page(request: web.Request) -> web.Response:
    """Serve the rendered index or tip page as HTML."""
    path = request.match_info["path"]
    build = request.app[site_loader_key].load()
    renderer = request.app[renderer_key]

    if not path.strip("/"):
        return web.Response(text=renderer.render_index(build.index), content_type="text/html")

    page = build.site.get_page(path)
    document = build.index.get(page.tip_id) if page is not None else None
    if document is None:
        raise web.HTTPNotFound(text=f"Page not found: /{path}")

    return web.Response(text=renderer.render_page(document, build), content_type="text/html")


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        verbose: Log rendering warnings

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[build_error_middleware])

    app[site_loader_key] = SiteLoader(config.docs.source_dir, config.tips)
    app[renderer_key] = PageRenderer()
    app[verbose_key] = verbose

    # API routes (must be registered first to take precedence over page fallback)
    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_diagnostics_routes())

    app.router.add_get("/{path:.*}", serve_page)

    return app


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Log rendering warnings
    """
    app = create_app(config, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port)
