"""Shared test fixtures."""

import asyncio
import json
from pathlib import Path

import pytest
from folio.config import Config, ContentConfig, LiveReloadConfig, ServerConfig, SiteSettings
from folio.core.site import SiteConfig
from folio.core.transport import TransportError

SITE = {
    "title": "Ada Lovelace",
    "nav": [
        {"href": "#home", "label": "Home"},
        {"href": "#about", "label": "About"},
        {"href": "#projects", "label": "Projects"},
        {"href": "#publications", "label": "Publications"},
        {"href": "#blog", "label": "Blog"},
    ],
    "social": [
        {"platform": "github", "url": "https://github.com/ada", "label": "GitHub"},
        {"platform": "email", "url": "mailto:ada@example.com", "label": "Email"},
    ],
    "contact": {"email": "ada@example.com", "office": "Room 42"},
}

PROJECTS_INDEX = {
    "title": "Projects",
    "intro": "Things I have *built*.",
    "items": [
        {
            "slug": "engine",
            "title": "Analytical Engine",
            "description": "A general-purpose **computer**.",
            "tags": ["hardware", "history"],
        },
        {"slug": "notes", "title": "Notes on the Engine"},
    ],
}

BLOG_INDEX = {
    "title": "Blog",
    "intro": "Occasional writing.",
    "items": [
        {"slug": "hello", "title": "Hello World", "date": "2024-01-05", "summary": "First post."},
        {"slug": "secret", "title": "Unfinished Thoughts", "draft": True},
    ],
}

PUBLICATIONS = {
    "title": "Publications",
    "intro": "Selected papers.",
    "items": [
        {"title": "Sketch of the Analytical Engine", "authors": ["A. Lovelace"], "venue": "Taylor's Scientific Memoirs", "year": 1843, "url": "https://example.com/sketch"},
        {"title": "On Bernoulli Numbers", "authors": "A. Lovelace", "venue": "Note G", "year": 1843},
        {"title": "Later Work", "authors": ["A. Lovelace", "C. Babbage"], "venue": "Letters", "year": 1850},
        {"title": "Undated Draft", "venue": "Archive"},
    ],
    "note": "Full list available on request: {contact.email}. Fax: {contact.fax}.",
}

FILES = {
    "site.json": json.dumps(SITE),
    "home.md": "---\ntitle: Welcome\n---\n# Hello\n\nI write programs for engines.",
    "about.md": "# About\n\nMathematician.",
    "projects/_index.json": json.dumps(PROJECTS_INDEX),
    "projects/engine.md": (
        "---\n"
        "title: Analytical Engine\n"
        "tags: [hardware, \"history\"]\n"
        "date: 1837\n"
        "github: https://github.com/ada/engine\n"
        "paper: https://example.com/paper\n"
        "---\n"
        "The engine **weaves** algebraic patterns."
    ),
    "blog/_index.json": json.dumps(BLOG_INDEX),
    "blog/hello.md": "---\ntitle: Hello World\ndate: 2024-01-05\ntags: [intro]\n---\nFirst post body.",
    "blog/secret.md": "---\ntitle: Unfinished Thoughts\ndraft: true\n---\nNot ready.",
    "publications.json": json.dumps(PUBLICATIONS),
}


class MemoryTransport:
    """In-memory transport with optional per-path delays."""

    def __init__(self, files: dict[str, str]) -> None:
        self.files = dict(files)
        self.delays: dict[str, asyncio.Event] = {}
        self.requests: list[str] = []
        self.closed = False

    async def fetch_text(self, path: str) -> str:
        self.requests.append(path)
        gate = self.delays.get(path)
        if gate is not None:
            await gate.wait()
        if path not in self.files:
            raise TransportError(path, "not found", 404)
        return self.files[path]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def site_files() -> dict[str, str]:
    """Content files of the sample site, keyed by relative path."""
    return dict(FILES)


@pytest.fixture
def memory_transport(site_files: dict[str, str]) -> MemoryTransport:
    """Transport serving the sample site from memory."""
    return MemoryTransport(site_files)


@pytest.fixture
def content_dir(tmp_path: Path, site_files: dict[str, str]) -> Path:
    """Write the sample site to a content directory."""
    root = tmp_path / "content"
    for rel_path, text in site_files.items():
        file_path = root / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def test_config(content_dir: Path) -> Config:
    """Create a test configuration pointing at the sample content directory."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(root=content_dir),
        site=SiteSettings(title="Ada Lovelace"),
        live_reload=LiveReloadConfig(enabled=False),
    )


@pytest.fixture
def site_config() -> SiteConfig:
    """Parsed site.json of the sample site."""
    return SiteConfig.from_dict(SITE)
