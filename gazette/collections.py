"""Derived indexes over the loaded posts.

Tags and archives reference posts by their position in the site's post list,
so they stay valid only for the list they were built from. Both are rebuilt
on every pipeline run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import UrlConfig
from .content import Document
from .utils import fill_placeholders


@dataclass
class Tag:
    """A tag and the positions of the posts carrying it.

    Attributes:
        name: Tag name as written in front matter.
        url: Canonical tag URL (``tag_link_format`` with ``:tag`` filled in).
        page_format: Paginated listing URL format, still containing ``:page``.
        posts_index: Positions into the post list, in post order.
    """

    name: str
    url: str
    page_format: str
    posts_index: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.posts_index)


@dataclass
class Archive:
    """Posts published in one calendar year."""

    year: int
    posts_index: list[int] = field(default_factory=list)


def build_tags(posts: Sequence[Document], url_config: UrlConfig) -> list[Tag]:
    """Build the tag index.

    Tags are ordered by number of posts, descending. Tags with the same count
    keep the order in which they were first seen.
    """
    tags: dict[str, Tag] = {}
    for index, post in enumerate(posts):
        for name in post.metadata.tags or []:
            tag = tags.get(name)
            if tag is None:
                tag = tags[name] = Tag(
                    name=name,
                    url=fill_placeholders(url_config.tag_link_format, tag=name),
                    page_format=fill_placeholders(url_config.tag_page_format, tag=name),
                )
            # a tag listed twice on one post still counts the post once
            if not tag.posts_index or tag.posts_index[-1] != index:
                tag.posts_index.append(index)
    return sorted(tags.values(), key=len, reverse=True)


def build_archives(posts: Sequence[Document]) -> list[Archive]:
    """Group posts by publish year, newest year first."""
    archives: dict[int, Archive] = {}
    for index, post in enumerate(posts):
        year = post.publish_time.year
        archives.setdefault(year, Archive(year=year)).posts_index.append(index)
    return sorted(archives.values(), key=lambda archive: archive.year, reverse=True)
