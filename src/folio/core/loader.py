"""Content loading.

Fetches raw text and JSON through a transport and turns markdown files
into metadata plus HTML. Failures are logged and returned as Err values.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from folio.core.frontmatter import FrontMatterBlock, parse_front_matter
from folio.core.markdown import MarkdownConverter
from folio.core.result import Err, FailureKind, Ok, Result
from folio.core.site import SiteConfig
from folio.core.transport import Transport, TransportError

logger = logging.getLogger(__name__)

SITE_CONFIG_PATH = "site.json"


@dataclass(frozen=True)
class MarkdownContent:
    """Markdown file with parsed front matter and rendered body."""

    front_matter: FrontMatterBlock
    html: str


class ContentLoader:
    """Loads content files relative to the content root."""

    def __init__(self, transport: Transport, converter: MarkdownConverter) -> None:
        """Initialize loader.

        Args:
            transport: Transport used to fetch raw content
            converter: Markdown converter for file bodies
        """
        self._transport = transport
        self._converter = converter

    async def load_text(self, path: str) -> Result[str]:
        """Fetch raw text.

        Args:
            path: Path relative to the content root (e.g., "about.md")

        Returns:
            Ok with file text, or Err(TRANSPORT)
        """
        try:
            text = await self._transport.fetch_text(path)
        except TransportError as e:
            logger.warning(f"Failed to load {path}: {e.reason}")
            return Err(FailureKind.TRANSPORT, path, e.reason)
        logger.debug(f"Loaded {path} ({len(text)} chars)")
        return Ok(text)

    async def load_json(self, path: str) -> Result[Any]:
        """Fetch and decode a JSON file.

        Returns:
            Ok with decoded data, or Err(TRANSPORT | PARSE)
        """
        loaded = await self.load_text(path)
        if isinstance(loaded, Err):
            return loaded

        try:
            data = json.loads(loaded.value)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON in {path}: {e}")
            return Err(FailureKind.PARSE, path, str(e))
        return Ok(data)

    async def load_markdown(self, path: str) -> Result[MarkdownContent]:
        """Fetch a markdown file, parse its front matter and render the body.

        Returns:
            Ok with MarkdownContent, or Err(TRANSPORT)
        """
        loaded = await self.load_text(path)
        if isinstance(loaded, Err):
            return loaded

        front_matter = parse_front_matter(loaded.value)
        html = self._converter.to_html(front_matter.body)
        return Ok(MarkdownContent(front_matter=front_matter, html=html))

    async def load_site_config(self) -> Result[SiteConfig]:
        """Load site.json.

        Returns:
            Ok with SiteConfig, or Err(TRANSPORT | PARSE)
        """
        loaded = await self.load_json(SITE_CONFIG_PATH)
        if isinstance(loaded, Err):
            return loaded

        try:
            site = SiteConfig.from_dict(loaded.value)
        except ValueError as e:
            logger.warning(f"Invalid site configuration in {SITE_CONFIG_PATH}: {e}")
            return Err(FailureKind.PARSE, SITE_CONFIG_PATH, str(e))
        return Ok(site)
