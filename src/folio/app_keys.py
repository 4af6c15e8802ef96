"""Application keys for type-safe app configuration access."""

from aiohttp import web

from folio.application import Application
from folio.config import Config
from folio.live.reload import LiveReloadManager

config_key = web.AppKey("config", Config)
application_key = web.AppKey("application", Application)
live_reload_key = web.AppKey("live_reload", LiveReloadManager)
