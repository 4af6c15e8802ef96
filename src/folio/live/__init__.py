"""Live reload for development mode."""

from folio.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
