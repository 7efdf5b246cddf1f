"""Pages API endpoint.

Renders a tip and returns JSON with metadata, ToC, references and HTML content.
"""

import json
import logging
from hashlib import md5

from aiohttp import web

from tipstage.app_keys import renderer_key, site_loader_key, verbose_key

logger = logging.getLogger(__name__)


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages/{path:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    build = request.app[site_loader_key].load()
    renderer = request.app[renderer_key]

    page = build.site.get_page(path)
    document = build.index.get(page.tip_id) if page is not None else None
    if document is None:
        return web.json_response(
            {"error": "Page not found", "path": path},
            status=404,
        )

    references = build.references.for_document(document.id)
    result = renderer.render(document, references, build.broken_references, index=build.index)

    if request.app[verbose_key] and result.warnings:
        for warning in result.warnings:
            logger.warning(f"{document.source}: {warning}")

    prev_page, next_page = build.site.get_neighbours(document.path)

    response_data = {
        "meta": {
            "id": document.id,
            "title": document.title,
            "path": document.path,
            "order": document.order,
            "published": document.published,
            "date": document.published_on.isoformat() if document.published_on else None,
            "source_file": document.source,
        },
        "breadcrumbs": [b.to_dict() for b in build.site.get_breadcrumbs(document.path)],
        "previous": {"title": prev_page.title, "path": prev_page.path} if prev_page else None,
        "next": {"title": next_page.title, "path": next_page.path} if next_page else None,
        "toc": [entry.to_dict() for entry in result.toc],
        "references": [
            {"target_id": r.target.id, "path": r.href, "text": r.reference.raw_text}
            for r in references
            if r.target in build.index
        ],
        "warnings": result.warnings,
        "content": result.html,
    }

    etag = _compute_etag(json.dumps(response_data, sort_keys=True))
    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.json_response(
        response_data,
        headers={
            "ETag": etag,
            "Cache-Control": "private, max-age=60",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) of the content hash
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
