"""Feed generation for Gazette.

This module renders the two literal-content artifacts of a build: the RSS
feed (written to ``atom.xml``) and ``sitemap.xml``. Both are plain strings;
the site writes them verbatim instead of going through the theme.

Classes:
    FeedGenerator: Base class for literal XML generators.
    RSSGenerator: RSS 2.0 channel with one item per post.
    SitemapGenerator: sitemaps.org url set.
    SitemapEntry: One url of the sitemap.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import TYPE_CHECKING, Any

from markupsafe import escape

if TYPE_CHECKING:
    from .config import Config
    from .content import Document

SITEMAP_CHANGEFREQ = "weekly"


class FeedGenerator(ABC):
    """Abstract base class for literal XML generators."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename, relative to the output root."""
        ...

    @abstractmethod
    def generate(self, items: Iterable[Any], config: Config) -> str:
        """Generate the document content."""
        ...


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed for content syndication.

    Items keep the order of the posts given (newest first when fed the
    site's post list). Links are absolute, built from ``url.base``.
    """

    @property
    def filename(self) -> str:
        return "atom.xml"

    def generate(self, items: Iterable[Document], config: Config) -> str:
        """Generate RSS feed content.

        Args:
            items: Posts with rendered bodies.
            config: Site configuration.

        Returns:
            RSS XML content.
        """
        entries = []
        for post in items:
            link = config.full_url(post.route_slug)
            # naive publish times are local wall-clock times
            pub_date = format_datetime(post.publish_time.astimezone())
            entries.append(
                f"<item><title>{escape(post.metadata.title)}</title>"
                f"<link>{escape(link)}</link>"
                f'<guid isPermaLink="true">{escape(link)}</guid>'
                f"<description>{escape(post.rendered_excerpt or post.rendered_body)}</description>"
                f"<content:encoded>{escape(post.rendered_body)}</content:encoded>"
                f"<pubDate>{pub_date}</pubDate></item>"
            )

        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/"><channel>',
            f"<title>{escape(config.site.title)}</title>",
            f"<link>{escape(config.full_url(''))}</link>",
            f"<description>{escape(config.site.description)}</description>",
            f"<language>{escape(config.site.language)}</language>",
        ]
        rss.extend(entries)
        rss.append("</channel></rss>")
        return "\n".join(rss)


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: datetime
    priority: float
    changefreq: str = SITEMAP_CHANGEFREQ


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml for search engine indexing.

    Creates a sitemap following the sitemaps.org protocol. Last modification
    times are written in RFC 3339 form, treating naive times as UTC.
    """

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, items: Iterable[SitemapEntry], config: Config) -> str:
        """Generate sitemap.xml content.

        Args:
            items: Entries with absolute ``loc`` URLs.
            config: Site configuration (unused).

        Returns:
            Sitemap XML content.
        """
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for entry in items:
            lastmod = entry.lastmod
            if lastmod.tzinfo is None:
                lastmod = lastmod.replace(tzinfo=timezone.utc)
            lines.append(
                f"  <url><loc>{escape(entry.loc)}</loc>"
                f"<changefreq>{entry.changefreq}</changefreq>"
                f"<priority>{entry.priority:.1f}</priority>"
                f"<lastmod>{lastmod.isoformat()}</lastmod></url>"
            )
        lines.append("</urlset>")
        return "\n".join(lines)
