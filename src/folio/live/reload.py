"""WebSocket-based live reload for development mode.

Monitors content files for changes and notifies connected clients via
WebSocket to trigger page reloads.
"""

import asyncio
import json
import logging
import weakref
from collections.abc import Awaitable, Callable
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from folio.core.loader import SITE_CONFIG_PATH
from folio.core.routing import route_href

logger = logging.getLogger(__name__)

INDEX_STEM = "_index"


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload.

    Coordinates between file system watcher and connected WebSocket clients
    to provide automatic page refresh on content changes.
    """

    def __init__(
        self,
        content_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        on_site_change: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            content_dir: Content root to watch for changes
            watch_patterns: Glob patterns to watch (default: ["**/*.md", "**/*.json"])
            on_site_change: Called before broadcasting when site.json changes
        """
        self._content_dir = content_dir
        self._watch_patterns = watch_patterns or ["**/*.md", "**/*.json"]
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None
        self.on_site_change = on_site_change

    @property
    def content_dir(self) -> Path:
        return self._content_dir

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch for file changes and broadcast reload events."""
        async for changes in awatch(self._content_dir):
            for change_type, path_str in changes:
                if change_type == Change.deleted:
                    continue

                path = Path(path_str)
                if not self.matches_patterns(path):
                    continue

                await self.handle_change(path)

    async def handle_change(self, path: Path) -> None:
        """React to a changed content file."""
        route = self.to_route(path)
        if route == "" and self.on_site_change is not None:
            await self.on_site_change()
        logger.debug(f"Content changed: {path} -> {route or 'site'}")
        await self._broadcast_reload(route)

    def matches_patterns(self, path: Path) -> bool:
        """Check if a path under the content root matches any watch pattern."""
        try:
            relative = path.relative_to(self._content_dir)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            # Path.match() does not let "**/" match zero directories
            if relative.match(pattern) or relative.match(pattern.removeprefix("**/")):
                return True
        return False

    def to_route(self, file_path: Path) -> str:
        """Convert a content file path to the route fragment it affects.

        Returns:
            Fragment such as "#projects/my-project"; empty for site.json,
            which affects every page
        """
        relative = file_path.relative_to(self._content_dir)
        if relative.as_posix() == SITE_CONFIG_PATH:
            return ""

        parts = relative.with_suffix("").parts
        if len(parts) == 1:
            return route_href(parts[0])
        if parts[-1] == INDEX_STEM:
            return route_href(parts[0])
        return route_href(parts[0], parts[1])

    async def _broadcast_reload(self, route: str) -> None:
        """Broadcast reload event to all connected clients."""
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "route": route})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get("/ws/live-reload", manager.handle_websocket)]
