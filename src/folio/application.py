"""Application state.

Owns the content loader, the site configuration and the page renderers
for the lifetime of the process. Navigators for individual display
sessions are created from it.
"""

import logging
from dataclasses import dataclass

from folio.config import Config
from folio.core.loader import ContentLoader
from folio.core.markdown import MarkdownConverter
from folio.core.renderers import ERROR_PAGE, PageRenderers
from folio.core.result import Err
from folio.core.site import SiteConfig
from folio.core.transport import FileTransport, HttpTransport, Transport
from folio.navigator import NavigationResult, Navigator
from folio.shell import Display

logger = logging.getLogger(__name__)


def create_transport(config: Config) -> Transport:
    """Create the transport for the configured content root.

    An HTTP base URL takes precedence over the local content directory.
    """
    if config.content.base_url:
        return HttpTransport(config.content.base_url)
    return FileTransport(config.content.root)


@dataclass
class Application:
    """Process-wide state: configuration, site data and renderers."""

    config: Config
    transport: Transport
    loader: ContentLoader
    converter: MarkdownConverter
    site: SiteConfig
    renderers: PageRenderers
    site_error: Err | None = None

    @classmethod
    async def start(cls, config: Config, transport: Transport | None = None) -> "Application":
        """Load site.json and build the renderers.

        A site.json that cannot be loaded does not raise: the application
        starts in a degraded mode where every page shows the error view.

        Args:
            config: Application configuration
            transport: Transport override (default: from config)

        Returns:
            Started Application
        """
        transport = transport or create_transport(config)
        converter = MarkdownConverter()
        loader = ContentLoader(transport, converter)

        loaded = await loader.load_site_config()
        site_error: Err | None = None
        if isinstance(loaded, Err):
            logger.error(f"Site configuration unavailable: {loaded}")
            site = SiteConfig()
            site_error = loaded
        else:
            site = loaded.value
            logger.info(f"Loaded site configuration ({len(site.nav)} nav entries)")

        return cls(
            config=config,
            transport=transport,
            loader=loader,
            converter=converter,
            site=site,
            renderers=PageRenderers(loader, converter, site),
            site_error=site_error,
        )

    @property
    def healthy(self) -> bool:
        """Whether the site configuration loaded."""
        return self.site_error is None

    async def reload_site(self) -> None:
        """Reload site.json, keeping the previous configuration on failure."""
        loaded = await self.loader.load_site_config()
        if isinstance(loaded, Err):
            logger.warning(f"Keeping previous site configuration: {loaded}")
            return
        self.site = loaded.value
        self.site_error = None
        self.renderers = PageRenderers(self.loader, self.converter, self.site)
        logger.info("Reloaded site configuration")

    def new_session(self, display: Display) -> Navigator:
        """Populate a display with site chrome and return its navigator."""
        display.populate_nav(self.site.nav)
        display.populate_footer(self.site.social)
        if not self.healthy:
            display.display(ERROR_PAGE.html, ERROR_PAGE.page_class)
        return Navigator(
            self.renderers,
            display,
            default_page=self.config.site.default_route,
        )

    async def render_into(self, display: Display, fragment: str) -> NavigationResult | None:
        """Run a single navigation on a fresh display.

        Returns:
            NavigationResult, or None when the application is degraded and
            the error view was displayed instead
        """
        navigator = self.new_session(display)
        if not self.healthy:
            return None
        return await navigator.handle(fragment)

    async def close(self) -> None:
        await self.transport.close()
