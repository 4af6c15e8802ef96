"""Site configuration API endpoint."""

from aiohttp import web

from folio.app_keys import application_key


def create_site_routes() -> list[web.RouteDef]:
    return [web.get("/api/site", get_site)]


async def get_site(request: web.Request) -> web.Response:
    application = request.app[application_key]
    if not application.healthy:
        return web.json_response(
            {"error": "Site configuration unavailable", "detail": str(application.site_error)},
            status=503,
        )
    return web.json_response(application.site.to_dict())
