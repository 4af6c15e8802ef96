"""Site-wide configuration loaded from site.json.

Holds navigation entries, social links and contact fields. Read-only
after load; shared by the presentation shell and template resolution.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

_TEMPLATE_VAR_RE = re.compile(r"\{contact\.([A-Za-z0-9_-]+)\}")


@dataclass(frozen=True)
class NavEntry:
    """Navigation link."""

    href: str
    label: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"href": self.href, "label": self.label}


@dataclass(frozen=True)
class SocialLink:
    """Social profile link shown in the footer."""

    platform: str
    url: str
    label: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"platform": self.platform, "url": self.url, "label": self.label}


@dataclass(frozen=True)
class SiteConfig:
    """Site configuration."""

    nav: tuple[NavEntry, ...] = ()
    social: tuple[SocialLink, ...] = ()
    contact: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    title: str | None = None

    @classmethod
    def from_dict(cls, data: object) -> "SiteConfig":
        """Build site configuration from parsed site.json data.

        Args:
            data: Decoded JSON document

        Returns:
            SiteConfig instance

        Raises:
            ValueError: If the document has an unexpected shape
        """
        if not isinstance(data, dict):
            raise ValueError("site configuration must be an object")

        title = data.get("title")
        if title is not None and not isinstance(title, str):
            raise ValueError("title must be a string")

        return cls(
            nav=tuple(cls._parse_nav(data.get("nav", []))),
            social=tuple(cls._parse_social(data.get("social", []))),
            contact=MappingProxyType(cls._parse_contact(data.get("contact", {}))),
            title=title,
        )

    @classmethod
    def _parse_nav(cls, data: object) -> list[NavEntry]:
        if not isinstance(data, list):
            raise ValueError("nav must be a list")

        entries: list[NavEntry] = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"nav[{idx}] must be an object")
            href = _require_str(item, "href", f"nav[{idx}]")
            label = _require_str(item, "label", f"nav[{idx}]")
            entries.append(NavEntry(href=href, label=label))
        return entries

    @classmethod
    def _parse_social(cls, data: object) -> list[SocialLink]:
        if not isinstance(data, list):
            raise ValueError("social must be a list")

        links: list[SocialLink] = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"social[{idx}] must be an object")
            platform = _require_str(item, "platform", f"social[{idx}]")
            url = _require_str(item, "url", f"social[{idx}]")
            label = item.get("label", platform)
            if not isinstance(label, str):
                raise ValueError(f"social[{idx}].label must be a string")
            links.append(SocialLink(platform=platform, url=url, label=label))
        return links

    @classmethod
    def _parse_contact(cls, data: object) -> dict[str, str]:
        if not isinstance(data, dict):
            raise ValueError("contact must be an object")

        contact: dict[str, str] = {}
        for key, value in data.items():
            # Numbers (e.g. phone extensions) are accepted and stringified
            if isinstance(value, bool) or not isinstance(value, str | int | float):
                raise ValueError(f"contact.{key} must be a string")
            contact[key] = str(value)
        return contact

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "nav": [entry.to_dict() for entry in self.nav],
            "social": [link.to_dict() for link in self.social],
            "contact": dict(self.contact),
        }
        if self.title is not None:
            result["title"] = self.title
        return result


def resolve_template_vars(text: str, site: SiteConfig) -> str:
    """Substitute ``{contact.<field>}`` placeholders with contact values.

    Unknown fields are left as-is.

    Args:
        text: Text containing placeholders
        site: Site configuration providing the contact map

    Returns:
        Text with known placeholders replaced
    """

    def _replace(match: re.Match[str]) -> str:
        return site.contact.get(match.group(1), match.group(0))

    return _TEMPLATE_VAR_RE.sub(_replace, text)


def _require_str(item: dict[str, Any], key: str, where: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{where}.{key} must be a string")
    return value
