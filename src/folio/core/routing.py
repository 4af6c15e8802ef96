"""Fragment routing.

Maps a URL fragment such as ``#projects/my-project`` to a Route, and a
Route to the view that renders it.
"""

from dataclasses import dataclass
from enum import Enum

DEFAULT_PAGE = "home"


@dataclass(frozen=True)
class Route:
    """Parsed page name and optional slug."""

    page: str
    slug: str | None = None

    @property
    def fragment(self) -> str:
        """Fragment string for this route (e.g., "#blog/hello")."""
        return route_href(self.page, self.slug)


class View(Enum):
    """Renderable view selected by dispatch."""

    HOME = "home"
    ABOUT = "about"
    PROJECT_LIST = "project_list"
    PROJECT_DETAIL = "project_detail"
    PUBLICATIONS = "publications"
    BLOG_LIST = "blog_list"
    BLOG_POST = "blog_post"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Dispatch:
    """Outcome of dispatching a route."""

    view: View
    slug: str | None = None


_SIMPLE_PAGES = {
    "home": View.HOME,
    "about": View.ABOUT,
    "publications": View.PUBLICATIONS,
}

# page -> (listing view, detail view)
_COLLECTION_PAGES = {
    "projects": (View.PROJECT_LIST, View.PROJECT_DETAIL),
    "blog": (View.BLOG_LIST, View.BLOG_POST),
}

PAGES = frozenset(_SIMPLE_PAGES) | frozenset(_COLLECTION_PAGES)


def resolve_route(fragment: str, default_page: str = DEFAULT_PAGE) -> Route:
    """Parse a URL fragment into a Route.

    Only one slug segment is supported; anything after a second "/" is
    dropped.

    Args:
        fragment: Fragment with or without the leading "#"
        default_page: Page used when the fragment is empty

    Returns:
        Route for the fragment
    """
    path = fragment[1:] if fragment.startswith("#") else fragment
    if not path:
        return Route(page=default_page)

    parts = path.split("/")
    page = parts[0]
    slug = parts[1] if len(parts) > 1 else None
    return Route(page=page, slug=slug or None)


def dispatch(route: Route) -> Dispatch:
    """Select the view for a route.

    Total: unknown pages map to View.NOT_FOUND rather than raising.
    """
    view = _SIMPLE_PAGES.get(route.page)
    if view is not None:
        return Dispatch(view)

    collection = _COLLECTION_PAGES.get(route.page)
    if collection is None:
        return Dispatch(View.NOT_FOUND)

    listing, detail = collection
    if route.slug is None:
        return Dispatch(listing)
    return Dispatch(detail, route.slug)


def route_href(page: str, slug: str | None = None) -> str:
    """Build a fragment link for a page and optional slug."""
    if slug:
        return f"#{page}/{slug}"
    return f"#{page}"
