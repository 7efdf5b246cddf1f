"""Application keys for type-safe app configuration access."""

from aiohttp import web

from tipstage.core.renderer import PageRenderer
from tipstage.core.site import SiteLoader

renderer_key = web.AppKey("renderer", PageRenderer)
site_loader_key = web.AppKey("site_loader", SiteLoader)
verbose_key = web.AppKey("verbose", bool)
