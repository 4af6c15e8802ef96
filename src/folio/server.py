"""aiohttp server for Folio.

Application factory and route registration. Pages are rendered
server-side for the initial request; later hash changes are served by
the pages API.
"""

import logging

from aiohttp import web

from folio.api.pages import create_pages_routes
from folio.api.site import create_site_routes
from folio.app_keys import application_key, config_key, live_reload_key
from folio.application import Application
from folio.config import Config
from folio.core.routing import route_href
from folio.core.transport import Transport
from folio.live.reload import LiveReloadManager, create_live_reload_routes
from folio.shell import HtmlShell

logger = logging.getLogger(__name__)


async def shell_page(request: web.Request) -> web.Response:
    """Serve the full HTML page for a path.

    ``/projects/my-project`` renders the same page as ``#projects/my-project``.
    """
    application = request.app[application_key]
    config = request.app[config_key]

    path = request.match_info.get("path", "").strip("/")
    page, _, rest = path.partition("/")
    fragment = route_href(page, rest.split("/", 1)[0] or None) if page else ""

    shell = HtmlShell(config.site.title, live_reload=config.live_reload.enabled)
    result = await application.render_into(shell, fragment)
    status = 200
    if result is None:
        status = 503
    else:
        shell.page_title = result.page.title
        if result.failure is not None:
            status = 404
    return web.Response(text=shell.render_document(), content_type="text/html", status=status)


def create_app(config: Config, *, transport: Transport | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        transport: Content transport override (default: from config)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[config_key] = config

    async def _start_application(app: web.Application) -> None:
        app[application_key] = await Application.start(config, transport)

    app.on_startup.append(_start_application)
    app.on_cleanup.append(_stop_application)

    # API routes (must be registered first to take precedence over the page fallback)
    app.router.add_routes(create_pages_routes())
    app.router.add_routes(create_site_routes())

    if config.live_reload.enabled and config.content.base_url is None:
        manager = LiveReloadManager(
            config.content.root,
            watch_patterns=config.live_reload.watch_patterns,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Serve the local content root so browsers and HttpTransport peers can fetch it
    if config.content.base_url is None and config.content.root.is_dir():
        app.router.add_static("/content", config.content.root)

    # Page fallback - must be last to catch all non-API routes
    app.router.add_get("/{path:.*}", shell_page)

    return app


async def _stop_application(app: web.Application) -> None:
    """Close the content transport on application cleanup."""
    application = app.get(application_key)
    if application is not None:
        await application.close()


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    manager = app[live_reload_key]
    manager.on_site_change = app[application_key].reload_site
    await manager.start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving on http://{config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
