"""Pages API endpoint.

Renders a route fragment and returns the content fragment as JSON for
client-side hash navigation.
"""

from aiohttp import web

from folio.app_keys import application_key
from folio.core.renderers import ERROR_PAGE
from folio.navigator import NavigationState
from folio.shell import HtmlShell


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/pages", get_page),
        web.get("/api/pages/{fragment:.*}", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    fragment = request.match_info.get("fragment", "")
    application = request.app[application_key]

    shell = HtmlShell()
    result = await application.render_into(shell, fragment)
    if result is None:
        return web.json_response(
            {
                "route": None,
                "state": NavigationState.FAILED.value,
                "page_class": ERROR_PAGE.page_class,
                "title": ERROR_PAGE.title,
                "content": ERROR_PAGE.html,
            },
            status=503,
        )

    response_data = {
        "route": {"page": result.route.page, "slug": result.route.slug},
        "state": result.state.value,
        "page_class": result.page.page_class,
        "title": result.page.title,
        "content": result.page.html,
    }
    status = 404 if result.state is NavigationState.FAILED else 200
    return web.json_response(response_data, status=status)
