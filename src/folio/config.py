"""Configuration management for Folio.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from folio.core.routing import DEFAULT_PAGE
from folio.core.transport import DEFAULT_CONTENT_ROOT

CONFIG_FILENAME = "folio.toml"

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.json"]


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content root configuration.

    When base_url is set, content is fetched over HTTP from it instead of
    being read from root.
    """

    root: Path = field(default_factory=lambda: Path(DEFAULT_CONTENT_ROOT))
    base_url: str | None = None


@dataclass
class SiteSettings:
    """Site behavior configuration."""

    default_route: str = DEFAULT_PAGE
    title: str = "Portfolio"


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = False
    watch_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_WATCH_PATTERNS))


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    site: SiteSettings = field(default_factory=SiteSettings)
    live_reload: LiveReloadConfig = field(default_factory=LiveReloadConfig)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for folio.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            site=cls._parse_site(data.get("site")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content section; root is relative to the config file."""
        if data is None:
            return ContentConfig(root=config_dir / DEFAULT_CONTENT_ROOT)

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        root = data.get("root", DEFAULT_CONTENT_ROOT)
        if not isinstance(root, str):
            raise ValueError("content.root must be a string")

        base_url = data.get("base_url")
        if base_url is not None:
            if not isinstance(base_url, str):
                raise ValueError("content.base_url must be a string")
            if not base_url.startswith(("http://", "https://")):
                raise ValueError("content.base_url must be an http(s) URL")

        return ContentConfig(root=config_dir / root, base_url=base_url)

    @classmethod
    def _parse_site(cls, data: object) -> SiteSettings:
        if data is None:
            return SiteSettings()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        default_route = data.get("default_route", DEFAULT_PAGE)
        if not isinstance(default_route, str) or not default_route:
            raise ValueError("site.default_route must be a non-empty string")

        title = data.get("title", "Portfolio")
        if not isinstance(title, str):
            raise ValueError("site.title must be a string")

        return SiteSettings(default_route=default_route.lstrip("#"), title=title)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", False)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns", DEFAULT_WATCH_PATTERNS)
        if not isinstance(watch_patterns_raw, list):
            raise ValueError("live_reload.watch_patterns must be a list")
        watch_patterns: list[str] = []
        for item in watch_patterns_raw:
            if not isinstance(item, str):
                raise ValueError("live_reload.watch_patterns items must be strings")
            watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_root: Path | None = None,
        base_url: str | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            content_root: Override content.root
            base_url: Override content.base_url
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if content_root is not None or base_url is not None:
            content = replace(
                self.content,
                root=content_root if content_root is not None else self.content.root,
                base_url=base_url if base_url is not None else self.content.base_url,
            )

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, content=content, live_reload=live_reload)
