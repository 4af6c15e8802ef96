"""Content transports.

A transport fetches UTF-8 text from a path relative to the content root.
Any non-success outcome is raised as TransportError.
"""

import asyncio
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

import aiohttp

DEFAULT_CONTENT_ROOT = "content"


class TransportError(Exception):
    """Content could not be fetched."""

    def __init__(self, path: str, reason: str, status: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.status = status
        super().__init__(f"Failed to fetch {path}: {reason}")


class Transport(Protocol):
    """Fetches raw content text by relative path."""

    async def fetch_text(self, path: str) -> str: ...

    async def close(self) -> None: ...


class HttpTransport:
    """Fetches content over HTTP relative to a base URL.

    When no session is given, one is created lazily and closed by close().
    """

    def __init__(self, base_url: str, session: aiohttp.ClientSession | None = None) -> None:
        """Initialize transport.

        Args:
            base_url: URL of the content root (e.g., "https://example.com/content")
            session: Optional externally managed client session
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        """Content root URL, always ending with a slash."""
        return self._base_url

    async def fetch_text(self, path: str) -> str:
        url = self._base_url + quote(path.lstrip("/"))
        session = self._get_session()
        try:
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise TransportError(path, f"HTTP {response.status}", response.status)
                return await response.text(encoding="utf-8")
        except aiohttp.ClientError as e:
            raise TransportError(path, str(e) or type(e).__name__) from e
        except UnicodeDecodeError as e:
            raise TransportError(path, "response is not valid UTF-8") from e

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session


class FileTransport:
    """Reads content from a local content root directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        """Content root directory."""
        return self._root

    async def fetch_text(self, path: str) -> str:
        file_path = self._resolve(path)
        try:
            return await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise TransportError(path, "not found", 404) from e
        except IsADirectoryError as e:
            raise TransportError(path, "not a file", 404) from e
        except UnicodeDecodeError as e:
            raise TransportError(path, "file is not valid UTF-8") from e
        except OSError as e:
            raise TransportError(path, e.strerror or str(e)) from e

    async def close(self) -> None:
        return None

    def _resolve(self, path: str) -> Path:
        """Resolve a relative path, refusing to leave the content root."""
        root = self._root.resolve()
        file_path = (root / path.lstrip("/")).resolve()
        if not file_path.is_relative_to(root):
            raise TransportError(path, "outside content root", 403)
        return file_path
