"""Navigation state machine.

A Navigator turns fragments into displayed pages:

    IDLE -> LOADING -> RENDERED
                    -> FAILED   (not-found view displayed)

Every navigation gets a sequence number. When navigations overlap, the
output of one that is older than the most recently completed navigation
is discarded so a slow response never overwrites a newer page.
"""

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from folio.core.renderers import NOT_FOUND_PAGE, PageRenderers, RenderedPage
from folio.core.result import Err, FailureKind
from folio.core.routing import DEFAULT_PAGE, Route, dispatch, resolve_route
from folio.shell import Display

logger = logging.getLogger(__name__)


class NavigationState(Enum):
    """Lifecycle state of the navigator."""

    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of one navigation."""

    sequence: int
    route: Route
    state: NavigationState
    page: RenderedPage
    failure: Err | None = None
    stale: bool = False


class Location:
    """Current URL fragment with change notifications."""

    def __init__(self, fragment: str = "") -> None:
        self._fragment = fragment
        self._listeners: list[Callable[[str], None]] = []

    @property
    def fragment(self) -> str:
        return self._fragment

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def navigate(self, target: str) -> None:
        """Set the fragment and notify listeners if it changed."""
        fragment = target if target.startswith("#") or not target else f"#{target}"
        if fragment == self._fragment:
            return
        self._fragment = fragment
        for listener in list(self._listeners):
            listener(fragment)


class Navigator:
    """Resolves, renders and displays pages for fragments."""

    def __init__(
        self,
        renderers: PageRenderers,
        display: Display,
        *,
        default_page: str = DEFAULT_PAGE,
    ) -> None:
        """Initialize navigator.

        Args:
            renderers: Renderers for all views
            display: Display surface receiving rendered pages
            default_page: Page shown for an empty fragment
        """
        self._renderers = renderers
        self._display = display
        self._default_page = default_page
        self._sequence = itertools.count(1)
        self._last_completed = 0
        self._state = NavigationState.IDLE
        self._current_route: Route | None = None
        self._tasks: set[asyncio.Task[NavigationResult]] = set()

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def current_route(self) -> Route | None:
        """Route of the most recently displayed page."""
        return self._current_route

    async def handle(self, fragment: str) -> NavigationResult:
        """Navigate to a fragment and display the result.

        Never raises for content or routing failures; those display the
        not-found view and end in FAILED.
        """
        sequence = next(self._sequence)
        route = resolve_route(fragment, self._default_page)
        self._state = NavigationState.LOADING
        self._display.set_active_nav(route.page)
        self._display.show_loading()
        logger.debug(f"Navigation {sequence}: {route.fragment}")

        try:
            result = await self._renderers.render(dispatch(route))
        except Exception as e:
            logger.exception(f"Renderer for {route.fragment} raised")
            result = Err(FailureKind.PARSE, route.fragment, str(e) or type(e).__name__)

        if sequence < self._last_completed:
            logger.debug(f"Navigation {sequence} superseded by {self._last_completed}, discarding")
            state = NavigationState.RENDERED if not isinstance(result, Err) else NavigationState.FAILED
            page = result.value if not isinstance(result, Err) else NOT_FOUND_PAGE
            return NavigationResult(sequence, route, state, page, stale=True)

        self._last_completed = sequence
        self._current_route = route

        if isinstance(result, Err):
            if result.kind is FailureKind.NOT_FOUND:
                logger.info(f"No page for route {route.fragment}")
            else:
                logger.warning(f"Navigation to {route.fragment} failed: {result}")
            self._display.set_active_nav(route.page)
            self._display.display(NOT_FOUND_PAGE.html, NOT_FOUND_PAGE.page_class)
            self._state = NavigationState.FAILED
            return NavigationResult(sequence, route, self._state, NOT_FOUND_PAGE, failure=result)

        self._display.set_active_nav(route.page)
        self._display.display(result.value.html, result.value.page_class)
        self._state = NavigationState.RENDERED
        return NavigationResult(sequence, route, self._state, result.value)

    def attach(self, location: Location) -> Callable[[], None]:
        """Handle a navigation for every fragment change of location.

        Must be called with a running event loop.

        Returns:
            Function that detaches the navigator
        """
        return location.subscribe(self._schedule)

    async def wait_idle(self) -> None:
        """Wait for all navigations started through attach() to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _schedule(self, fragment: str) -> None:
        task = asyncio.get_running_loop().create_task(self.handle(fragment))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
