"""Tests for the navigation state machine."""

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest
from folio.core.loader import ContentLoader
from folio.core.markdown import MarkdownConverter
from folio.core.renderers import NOT_FOUND_PAGE, PageRenderers
from folio.core.result import FailureKind
from folio.core.routing import Route
from folio.core.site import NavEntry, SiteConfig, SocialLink
from folio.navigator import Location, NavigationState, Navigator


class RecordingDisplay:
    """Display that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.html = ""
        self.page_class = ""
        self.active: str | None = None

    def display(self, html: str, page_class: str = "") -> None:
        self.calls.append(("display", page_class))
        self.html = html
        self.page_class = page_class

    def show_loading(self) -> None:
        self.calls.append(("loading", None))

    def populate_nav(self, entries: Sequence[NavEntry]) -> None:
        self.calls.append(("nav", list(entries)))

    def populate_footer(self, social: Sequence[SocialLink]) -> None:
        self.calls.append(("footer", list(social)))

    def set_active_nav(self, page: str) -> None:
        self.active = page


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def navigator(memory_transport: Any, site_config: SiteConfig, display: RecordingDisplay) -> Navigator:
    converter = MarkdownConverter()
    renderers = PageRenderers(ContentLoader(memory_transport, converter), converter, site_config)
    return Navigator(renderers, display)


class TestNavigatorHandle:
    """Tests for Navigator.handle()."""

    def test__new_navigator__is_idle(self, navigator: Navigator) -> None:
        assert navigator.state is NavigationState.IDLE
        assert navigator.current_route is None

    @pytest.mark.asyncio
    async def test__known_page__rendered(self, navigator: Navigator, display: RecordingDisplay) -> None:
        result = await navigator.handle("#about")

        assert result.state is NavigationState.RENDERED
        assert navigator.state is NavigationState.RENDERED
        assert result.route == Route("about")
        assert display.calls == [("loading", None), ("display", "page-about")]
        assert display.active == "about"
        assert "Mathematician." in display.html

    @pytest.mark.asyncio
    async def test__empty_fragment__renders_default_page(
        self, navigator: Navigator, display: RecordingDisplay
    ) -> None:
        result = await navigator.handle("")

        assert result.route == Route("home")
        assert display.page_class == "page-home"

    @pytest.mark.asyncio
    async def test__unknown_page__displays_not_found(
        self, navigator: Navigator, display: RecordingDisplay
    ) -> None:
        result = await navigator.handle("#unknown")

        assert result.state is NavigationState.FAILED
        assert result.failure is not None
        assert result.failure.kind is FailureKind.NOT_FOUND
        assert display.html == NOT_FOUND_PAGE.html
        assert display.page_class == "page-404"

    @pytest.mark.asyncio
    async def test__fetch_failure__displays_not_found(
        self, navigator: Navigator, display: RecordingDisplay
    ) -> None:
        result = await navigator.handle("#projects/does-not-exist")

        assert result.state is NavigationState.FAILED
        assert result.failure is not None
        assert result.failure.kind is FailureKind.TRANSPORT
        assert "404" in display.html

    @pytest.mark.asyncio
    async def test__parse_failure__displays_not_found(
        self, navigator: Navigator, display: RecordingDisplay, memory_transport: Any
    ) -> None:
        memory_transport.files["blog/_index.json"] = "{not json"

        result = await navigator.handle("#blog")

        assert result.state is NavigationState.FAILED
        assert result.failure is not None
        assert result.failure.kind is FailureKind.PARSE
        assert display.page_class == "page-404"

    @pytest.mark.asyncio
    async def test__renderer_raises__displays_not_found(
        self, navigator: Navigator, display: RecordingDisplay, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def broken(self: PageRenderers, target: Any) -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(PageRenderers, "render", broken)

        result = await navigator.handle("#about")

        assert result.state is NavigationState.FAILED
        assert navigator.state is NavigationState.FAILED
        assert result.failure is not None
        assert result.failure.message == "boom"
        assert display.page_class == "page-404"

    @pytest.mark.asyncio
    async def test__post_with_oversized_number__rendered(
        self, navigator: Navigator, display: RecordingDisplay, memory_transport: Any
    ) -> None:
        memory_transport.files["blog/hello.md"] = "---\ntitle: Big\nid: " + "1" * 5000 + "\n---\nBODY"

        result = await navigator.handle("#blog/hello")

        assert result.state is NavigationState.RENDERED
        assert "BODY" in display.html

    @pytest.mark.asyncio
    async def test__sequence_numbers__increase(self, navigator: Navigator) -> None:
        first = await navigator.handle("#home")
        second = await navigator.handle("#about")

        assert second.sequence > first.sequence
        assert navigator.current_route == Route("about")


class TestOverlappingNavigations:
    """Tests for discarding stale navigation output."""

    @pytest.mark.asyncio
    async def test__older_navigation_finishing_last__discarded(
        self, navigator: Navigator, display: RecordingDisplay, memory_transport: Any
    ) -> None:
        """A slow earlier navigation never overwrites a newer page."""
        gate = asyncio.Event()
        memory_transport.delays["projects/_index.json"] = gate

        slow = asyncio.create_task(navigator.handle("#projects"))
        await asyncio.sleep(0)
        fast = await navigator.handle("#about")
        gate.set()
        slow_result = await slow

        assert fast.stale is False
        assert slow_result.stale is True
        assert slow_result.sequence < fast.sequence
        assert display.page_class == "page-about"
        assert display.active == "about"
        assert navigator.current_route == Route("about")
        assert navigator.state is NavigationState.RENDERED

    @pytest.mark.asyncio
    async def test__older_navigation_finishing_first__displayed(
        self, navigator: Navigator, display: RecordingDisplay, memory_transport: Any
    ) -> None:
        """Completion order matching start order shows both pages in turn."""
        gate = asyncio.Event()
        memory_transport.delays["about.md"] = gate

        first = await navigator.handle("#home")
        second_task = asyncio.create_task(navigator.handle("#about"))
        await asyncio.sleep(0)
        assert display.page_class == "page-home"

        gate.set()
        second = await second_task

        assert first.stale is False
        assert second.stale is False
        assert display.page_class == "page-about"


class TestLocation:
    """Tests for Location and Navigator.attach()."""

    def test__navigate__notifies_listeners(self) -> None:
        location = Location()
        seen: list[str] = []
        location.subscribe(seen.append)

        location.navigate("#blog")
        location.navigate("about")

        assert seen == ["#blog", "#about"]
        assert location.fragment == "#about"

    def test__same_fragment__not_notified(self) -> None:
        location = Location("#blog")
        seen: list[str] = []
        location.subscribe(seen.append)

        location.navigate("#blog")

        assert seen == []

    def test__unsubscribe__stops_notifications(self) -> None:
        location = Location()
        seen: list[str] = []
        unsubscribe = location.subscribe(seen.append)

        unsubscribe()
        location.navigate("#blog")

        assert seen == []

    @pytest.mark.asyncio
    async def test__attached_navigator__renders_on_change(
        self, navigator: Navigator, display: RecordingDisplay
    ) -> None:
        location = Location()
        navigator.attach(location)

        location.navigate("#blog/hello")
        await navigator.wait_idle()

        assert display.page_class == "page-post"
        assert navigator.current_route == Route("blog", "hello")

    @pytest.mark.asyncio
    async def test__rapid_changes__last_one_wins(
        self, navigator: Navigator, display: RecordingDisplay, memory_transport: Any
    ) -> None:
        gate = asyncio.Event()
        memory_transport.delays["publications.json"] = gate
        location = Location()
        navigator.attach(location)

        location.navigate("#publications")
        location.navigate("#about")
        await asyncio.sleep(0.01)
        gate.set()
        await navigator.wait_idle()

        assert display.page_class == "page-about"
