"""Page renderers.

One renderer per view. Each loads its content through the ContentLoader
and assembles an HTML fragment for the content container.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from html import escape
from typing import Any

from folio.core.frontmatter import FrontMatterBlock
from folio.core.loader import ContentLoader, MarkdownContent
from folio.core.markdown import MarkdownConverter
from folio.core.result import Err, FailureKind, Ok, Result
from folio.core.routing import Dispatch, View, route_href
from folio.core.site import SiteConfig, resolve_template_vars

logger = logging.getLogger(__name__)

NOT_FOUND_HTML = """
<div class="text-center">
  <h1>404</h1>
  <p>Page not found</p>
  <a href="#home">Go home</a>
</div>
"""

ERROR_HTML = """
<div class="text-center">
  <h1>Something went wrong</h1>
  <p>The site could not be loaded. Please try again later.</p>
</div>
"""

# front matter key -> link label on project pages
PROJECT_LINKS = (("github", "GitHub"), ("paper", "Paper"), ("demo", "Demo"))


@dataclass(frozen=True)
class RenderedPage:
    """HTML fragment ready for display."""

    html: str
    page_class: str
    title: str | None = None


NOT_FOUND_PAGE = RenderedPage(html=NOT_FOUND_HTML, page_class="page-404", title="Not found")
ERROR_PAGE = RenderedPage(html=ERROR_HTML, page_class="page-error", title="Error")


class PageRenderers:
    """Renders every view of the site."""

    def __init__(
        self,
        loader: ContentLoader,
        converter: MarkdownConverter,
        site: SiteConfig,
    ) -> None:
        self._loader = loader
        self._converter = converter
        self._site = site
        self._views: dict[View, Callable[[str | None], Awaitable[Result[RenderedPage]]]] = {
            View.HOME: self.render_home,
            View.ABOUT: self.render_about,
            View.PROJECT_LIST: self.render_projects,
            View.PROJECT_DETAIL: self.render_project,
            View.PUBLICATIONS: self.render_publications,
            View.BLOG_LIST: self.render_blog,
            View.BLOG_POST: self.render_post,
            View.NOT_FOUND: self.render_not_found,
        }

    @property
    def site(self) -> SiteConfig:
        """Site configuration used for template variables."""
        return self._site

    async def render(self, target: Dispatch) -> Result[RenderedPage]:
        """Render the view selected by dispatch."""
        return await self._views[target.view](target.slug)

    async def render_home(self, slug: str | None = None) -> Result[RenderedPage]:
        return await self._render_markdown_page("home.md", "page-home")

    async def render_about(self, slug: str | None = None) -> Result[RenderedPage]:
        return await self._render_markdown_page("about.md", "page-about")

    async def render_projects(self, slug: str | None = None) -> Result[RenderedPage]:
        """Render the project listing from projects/_index.json."""
        path = "projects/_index.json"
        loaded = await self._load_index(path)
        if isinstance(loaded, Err):
            return loaded
        index, items = loaded.value

        cards = []
        for item in items:
            item_slug = _text(item, "slug")
            title = _text(item, "title") or item_slug
            href = route_href("projects", item_slug)
            parts = ['<article class="project-card">']
            parts.append(f'<h2><a href="{escape(href)}">{escape(title)}</a></h2>')
            description = _text(item, "description")
            if description:
                parts.append(f"<p>{self._converter.to_inline_html(description)}</p>")
            parts.append(_tags_html(_list(item, "tags")))
            parts.append("</article>")
            cards.append("".join(parts))

        html = self._index_header(index, "Projects") + f'<div class="project-grid">{"".join(cards)}</div>'
        return Ok(RenderedPage(html=html, page_class="page-projects", title=_text(index, "title") or "Projects"))

    async def render_project(self, slug: str | None) -> Result[RenderedPage]:
        """Render a single project page with tags and external links."""
        if not slug:
            return await self.render_projects()
        loaded = await self._loader.load_markdown(f"projects/{slug}.md")
        if isinstance(loaded, Err):
            return loaded

        content = loaded.value
        fm = content.front_matter
        title = fm.get_text("title", slug)
        links = [
            f'<a class="project-link" href="{escape(fm.get_text(key))}">{label}</a>'
            for key, label in PROJECT_LINKS
            if fm.get_text(key)
        ]
        html = (
            '<a class="back-link" href="#projects">&larr; Back to projects</a>'
            f"<article><header><h1>{escape(title)}</h1>"
            f"{_date_html(fm)}{_tags_html(fm.get_items('tags'))}"
            f'{_links_html(links)}</header>'
            f'<div class="content">{content.html}</div></article>'
        )
        return Ok(RenderedPage(html=html, page_class="page-project", title=title))

    async def render_publications(self, slug: str | None = None) -> Result[RenderedPage]:
        """Render publications grouped by year, newest first."""
        path = "publications.json"
        loaded = await self._load_index(path)
        if isinstance(loaded, Err):
            return loaded
        data, items = loaded.value

        sections = []
        for year, group in _group_by_year(items):
            heading = escape(str(year)) if year is not None else "Other"
            entries = "".join(self._publication_html(item) for item in group)
            sections.append(
                f'<section class="publication-year"><h2>{heading}</h2>'
                f'<ul class="publication-list">{entries}</ul></section>'
            )

        html = self._index_header(data, "Publications") + "".join(sections)
        note = _text(data, "note")
        if note:
            resolved = resolve_template_vars(note, self._site)
            html += f'<p class="publications-note">{self._converter.to_inline_html(resolved)}</p>'
        return Ok(RenderedPage(html=html, page_class="page-publications", title=_text(data, "title") or "Publications"))

    async def render_blog(self, slug: str | None = None) -> Result[RenderedPage]:
        """Render the blog listing, leaving out drafts."""
        path = "blog/_index.json"
        loaded = await self._load_index(path)
        if isinstance(loaded, Err):
            return loaded
        index, items = loaded.value

        previews = []
        for item in items:
            if item.get("draft") is True:
                continue
            item_slug = _text(item, "slug")
            title = _text(item, "title") or item_slug
            href = route_href("blog", item_slug)
            parts = ['<article class="post-preview">']
            parts.append(f'<h2><a href="{escape(href)}">{escape(title)}</a></h2>')
            date = _text(item, "date")
            if date:
                parts.append(f'<time class="post-date">{escape(date)}</time>')
            summary = _text(item, "summary")
            if summary:
                parts.append(f"<p>{self._converter.to_inline_html(summary)}</p>")
            parts.append(_tags_html(_list(item, "tags")))
            parts.append("</article>")
            previews.append("".join(parts))

        html = self._index_header(index, "Blog") + f'<div class="post-list">{"".join(previews)}</div>'
        return Ok(RenderedPage(html=html, page_class="page-blog", title=_text(index, "title") or "Blog"))

    async def render_post(self, slug: str | None) -> Result[RenderedPage]:
        """Render a single blog post.

        Drafts are not filtered here: a draft is reachable by its slug.
        """
        if not slug:
            return await self.render_blog()
        loaded = await self._loader.load_markdown(f"blog/{slug}.md")
        if isinstance(loaded, Err):
            return loaded

        content = loaded.value
        fm = content.front_matter
        title = fm.get_text("title", slug)
        html = (
            '<a class="back-link" href="#blog">&larr; Back to blog</a>'
            f"<article><header><h1>{escape(title)}</h1>"
            f"{_date_html(fm)}{_tags_html(fm.get_items('tags'))}</header>"
            f'<div class="content">{content.html}</div></article>'
        )
        return Ok(RenderedPage(html=html, page_class="page-post", title=title))

    async def render_not_found(self, slug: str | None = None) -> Result[RenderedPage]:
        return Err(FailureKind.NOT_FOUND, slug or "", "no view for route")

    async def _render_markdown_page(self, path: str, page_class: str) -> Result[RenderedPage]:
        loaded = await self._loader.load_markdown(path)
        if isinstance(loaded, Err):
            return loaded
        content: MarkdownContent = loaded.value
        title = content.front_matter.get_text("title") or None
        return Ok(RenderedPage(html=content.html, page_class=page_class, title=title))

    async def _load_index(self, path: str) -> Result[tuple[dict[str, Any], list[dict[str, Any]]]]:
        """Load a listing document of shape {title, intro, items: [...]}."""
        loaded = await self._loader.load_json(path)
        if isinstance(loaded, Err):
            return loaded

        data = loaded.value
        if not isinstance(data, dict):
            logger.warning(f"{path} must contain an object")
            return Err(FailureKind.PARSE, path, "document must be an object")
        items = data.get("items", [])
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            logger.warning(f"{path}: items must be a list of objects")
            return Err(FailureKind.PARSE, path, "items must be a list of objects")
        return Ok((data, items))

    def _index_header(self, data: dict[str, Any], default_title: str) -> str:
        title = _text(data, "title") or default_title
        html = f'<header class="page-header"><h1>{escape(title)}</h1>'
        intro = _text(data, "intro")
        if intro:
            resolved = resolve_template_vars(intro, self._site)
            html += f'<p class="intro">{self._converter.to_inline_html(resolved)}</p>'
        return html + "</header>"

    def _publication_html(self, item: dict[str, Any]) -> str:
        title = escape(_text(item, "title"))
        url = _text(item, "url")
        if url:
            title = f'<a href="{escape(url)}">{title}</a>'
        parts = [f'<li class="publication"><span class="publication-title">{title}</span>']
        authors = _list(item, "authors") or ((_text(item, "authors"),) if _text(item, "authors") else ())
        if authors:
            parts.append(f'<span class="publication-authors">{escape(", ".join(authors))}</span>')
        venue = _text(item, "venue")
        if venue:
            parts.append(f'<span class="publication-venue">{escape(venue)}</span>')
        parts.append("</li>")
        return "".join(parts)


def _text(data: dict[str, Any], key: str) -> str:
    """Read a scalar JSON field as a string; missing or null is empty."""
    value = data.get(key)
    if value is None or isinstance(value, dict | list):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v is not None)


def _tags_html(tags: tuple[str, ...]) -> str:
    if not tags:
        return ""
    items = "".join(f'<li class="tag">{escape(tag)}</li>' for tag in tags)
    return f'<ul class="tags">{items}</ul>'


def _links_html(links: list[str]) -> str:
    if not links:
        return ""
    return f'<div class="project-links">{"".join(links)}</div>'


def _date_html(fm: FrontMatterBlock) -> str:
    date = fm.get_text("date")
    if not date:
        return ""
    return f'<time class="post-date">{escape(date)}</time>'


def _group_by_year(items: list[dict[str, Any]]) -> list[tuple[str | None, list[dict[str, Any]]]]:
    """Group publications by year; newest first, undated last.

    Numeric and string years are the same group (1843 and "1843").
    """
    groups: dict[str | None, list[dict[str, Any]]] = {}
    for item in items:
        year = item.get("year")
        if isinstance(year, bool) or not isinstance(year, int | str) or year == "":
            key = None
        else:
            key = str(year).strip() or None
        groups.setdefault(key, []).append(item)

    dated = sorted((y for y in groups if y is not None), key=lambda y: f"{y:>8}", reverse=True)
    ordered = dated + ([None] if None in groups else [])
    return [(year, groups[year]) for year in ordered]
