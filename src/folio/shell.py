"""Presentation shell.

The Display protocol is everything the navigator needs from a display
surface. HtmlShell implements it by assembling a complete HTML document.
"""

import json
from collections.abc import Sequence
from html import escape
from typing import Protocol

from folio.core.renderers import NOT_FOUND_PAGE
from folio.core.site import NavEntry, SocialLink

LOADING_HTML = '<div class="loading" aria-busy="true">Loading&hellip;</div>'

# Shown by the browser when a page request fails or returns something unusable
_NOT_FOUND_RESPONSE = {"content": NOT_FOUND_PAGE.html, "page_class": NOT_FOUND_PAGE.page_class}

# platform -> short icon label; unknown platforms fall back to the link label
SOCIAL_ICONS = {
    "github": "GH",
    "gitlab": "GL",
    "linkedin": "in",
    "twitter": "X",
    "x": "X",
    "mastodon": "M",
    "bluesky": "BS",
    "scholar": "GS",
    "google-scholar": "GS",
    "orcid": "iD",
    "email": "@",
    "rss": "RSS",
}


class Display(Protocol):
    """Display surface driven by the navigator."""

    def display(self, html: str, page_class: str = "") -> None: ...

    def show_loading(self) -> None: ...

    def populate_nav(self, entries: Sequence[NavEntry]) -> None: ...

    def populate_footer(self, social: Sequence[SocialLink]) -> None: ...

    def set_active_nav(self, page: str) -> None: ...


class HtmlShell:
    """Builds a full HTML page around the content container."""

    def __init__(self, title: str = "Portfolio", *, live_reload: bool = False) -> None:
        self.title = title
        self.content = ""
        self.page_class = ""
        self.page_title: str | None = None
        self.nav: list[NavEntry] = []
        self.social: list[SocialLink] = []
        self.active_page: str | None = None
        self._live_reload = live_reload

    def display(self, html: str, page_class: str = "") -> None:
        self.content = html
        self.page_class = page_class

    def show_loading(self) -> None:
        self.display(LOADING_HTML, "page-loading")

    def populate_nav(self, entries: Sequence[NavEntry]) -> None:
        self.nav = list(entries)

    def populate_footer(self, social: Sequence[SocialLink]) -> None:
        self.social = list(social)

    def set_active_nav(self, page: str) -> None:
        self.active_page = page

    def render_document(self) -> str:
        """Render the complete HTML document."""
        title = escape(self.title)
        if self.page_title:
            title = f"{escape(self.page_title)} | {title}"
        class_attr = f' class="{escape(self.page_class)}"' if self.page_class else ""
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '<meta charset="utf-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
            f"<title>{title}</title>\n"
            "</head>\n"
            "<body>\n"
            '<header class="site-header">\n'
            f'<a class="site-title" href="#home">{escape(self.title)}</a>\n'
            '<button id="mobile-menu-toggle" aria-controls="main-nav" aria-expanded="false">'
            "Menu</button>\n"
            f"{self._render_nav()}\n"
            "</header>\n"
            f'<main id="content"{class_attr}>{self.content}</main>\n'
            f"{self._render_footer()}\n"
            f"{self._render_scripts()}"
            "</body>\n"
            "</html>\n"
        )

    def _render_nav(self) -> str:
        links = []
        for entry in self.nav:
            active = ' class="active"' if self._is_active(entry) else ""
            links.append(f'<a href="{escape(entry.href)}"{active}>{escape(entry.label)}</a>')
        return f'<nav id="main-nav">{"".join(links)}</nav>'

    def _is_active(self, entry: NavEntry) -> bool:
        if self.active_page is None:
            return False
        target = entry.href.lstrip("#").split("/", 1)[0]
        return target == self.active_page

    def _render_footer(self) -> str:
        links = []
        for link in self.social:
            icon = SOCIAL_ICONS.get(link.platform.lower(), link.label)
            links.append(
                f'<a href="{escape(link.url)}" aria-label="{escape(link.label)}" '
                f'data-platform="{escape(link.platform)}">'
                f'<span class="icon">{escape(icon)}</span></a>'
            )
        return f'<footer class="site-footer"><div class="social-links">{"".join(links)}</div></footer>'

    def _render_scripts(self) -> str:
        # Hash changes fetch the new page from /api/pages; responses older
        # than the last one displayed are dropped
        script = (
            "<script>\n"
            "document.getElementById('mobile-menu-toggle').addEventListener('click', function () {\n"
            "  var nav = document.getElementById('main-nav');\n"
            "  this.setAttribute('aria-expanded', nav.classList.toggle('open'));\n"
            "});\n"
            f"var LOADING_HTML = {_js_literal(LOADING_HTML)};\n"
            f"var NOT_FOUND = {_js_literal(_NOT_FOUND_RESPONSE)};\n"
            "var seq = 0, done = 0;\n"
            "function markActive(page) {\n"
            "  document.querySelectorAll('#main-nav a').forEach(function (a) {\n"
            "    a.classList.toggle('active', a.getAttribute('href').slice(1).split('/')[0] === page);\n"
            "  });\n"
            "}\n"
            "function showPage(mine, data) {\n"
            "  if (mine < done) { return; }\n"
            "  done = mine;\n"
            "  var main = document.getElementById('content');\n"
            "  main.className = data.page_class;\n"
            "  main.innerHTML = data.content;\n"
            "  window.scrollTo(0, 0);\n"
            "}\n"
            "function showRoute() {\n"
            "  var mine = ++seq;\n"
            "  var page = location.hash.slice(1).split('/')[0];\n"
            "  var main = document.getElementById('content');\n"
            "  main.className = 'page-loading';\n"
            "  main.innerHTML = LOADING_HTML;\n"
            "  markActive(page);\n"
            "  fetch('/api/pages/' + location.hash.slice(1))\n"
            "    .then(function (r) { return r.json(); })\n"
            "    .then(function (data) {\n"
            "      if (typeof data.content !== 'string') { throw new Error('unexpected response'); }\n"
            "      showPage(mine, data);\n"
            "    })\n"
            "    .catch(function () { showPage(mine, NOT_FOUND); });\n"
            "}\n"
            "window.addEventListener('hashchange', showRoute);\n"
            "if (location.hash) { showRoute(); }\n"
        )
        if self._live_reload:
            script += (
                "new WebSocket((location.protocol === 'https:' ? 'wss://' : 'ws://') + location.host"
                " + '/ws/live-reload').onmessage = function () { location.reload(); };\n"
            )
        return script + "</script>\n"


def _js_literal(value: object) -> str:
    """Encode a value as a JavaScript literal safe inside a script element."""
    return json.dumps(value).replace("</", "<\\/")
