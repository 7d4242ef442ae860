"""Template variable projection for Gazette.

Content records and indexes are projected into immutable variable records
before rendering. A TemplateVariables projector is built once per site after
indexing; it caches the base GlobalVars and the per-tag and per-author
projections so each output only pays for its own post projections.

Per-output variables are derived with ``global_with(...)``, which returns a
new GlobalVars and never touches the shared base.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any

from markupsafe import Markup

from .collections import Tag
from .config import Author, Config
from .content import Document
from .errors import ProjectionError
from .pagination import PageWindow
from .utils import fill_placeholders


@dataclass(frozen=True)
class AuthorVars:
    name: str
    bio: str = ""
    url: str = ""
    avatar: str = ""
    has_social: bool = False
    social: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_author(cls, author: Author) -> AuthorVars:
        return cls(
            name=author.name,
            bio=author.bio,
            url=author.website,
            avatar=author.avatar_url,
            has_social=bool(author.social),
            social=MappingProxyType(dict(author.social)),
        )


@dataclass(frozen=True)
class SiteVars:
    title: str
    subtitle: str
    description: str
    keywords: str
    language: str
    author: str
    root_url: str
    full_url: str


@dataclass(frozen=True)
class TagVars:
    name: str
    url: str
    posts_count: int


@dataclass(frozen=True)
class NavVars:
    name: str
    url: str


@dataclass(frozen=True)
class PostVars:
    """A post or page as seen by templates."""

    title: str
    permalink: str
    date: str
    updated: str
    brief: Markup
    content: Markup
    language: str
    comments: bool
    tags: tuple[TagVars, ...]
    datetime: datetime
    updated_datetime: datetime
    author: AuthorVars
    meta: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class PaginationVars:
    current: int
    prev: int
    next: int
    total: int
    total_pages: int
    has_prev: bool
    has_next: bool
    current_url: str
    prev_url: str
    next_url: str


@dataclass(frozen=True)
class ArchiveVars:
    year: int
    posts: tuple[PostVars, ...]


@dataclass(frozen=True)
class GlobalVars:
    """The variable tree handed to a template.

    ``site``, ``author``, ``navs`` and ``tags`` are shared by every output;
    the remaining fields are set per output.
    """

    site: SiteVars
    author: AuthorVars
    navs: tuple[NavVars, ...] = ()
    tags: tuple[TagVars, ...] = ()
    current_tag: TagVars | None = None
    pagination: PaginationVars | None = None
    post: PostVars | None = None
    page: PostVars | None = None
    posts: tuple[PostVars, ...] | None = None
    archives: tuple[ArchiveVars, ...] | None = None

    def with_overrides(self, **overrides: Any) -> GlobalVars:
        return replace(self, **overrides)

    def as_context(self) -> dict[str, Any]:
        """Top-level template context (a shallow mapping of the fields)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


class TemplateVariables:
    """Projects site content into template variables.

    Built once per site, after tags are indexed and documents are resolved.
    Its caches are read-only once constructed.

    Attributes:
        config: Site configuration.
    """

    def __init__(
        self,
        config: Config,
        tags: Sequence[Tag],
        documents: Iterable[Document] = (),
    ):
        self.config = config
        self._tags: dict[str, TagVars] = {
            tag.name: TagVars(
                name=tag.name,
                url=config.root_url(tag.url),
                posts_count=len(tag.posts_index),
            )
            for tag in tags
        }
        default_author = config.get_author(config.site.author)
        self._authors: dict[str, AuthorVars] = {
            config.site.author: AuthorVars.from_author(default_author)
        }
        for document in documents:
            author = document.resolved_author
            key = document.metadata.author
            if author is not None and key is not None and key not in self._authors:
                self._authors[key] = AuthorVars.from_author(author)
        self._global = GlobalVars(
            site=SiteVars(
                title=config.site.title,
                subtitle=config.site.subtitle,
                description=config.site.description,
                keywords=",".join(config.site.keywords),
                language=config.site.language,
                author=config.site.author,
                root_url=config.root_url(""),
                full_url=config.full_url(""),
            ),
            author=self._authors[config.site.author],
            navs=tuple(
                NavVars(name=nav.name, url=config.root_url(nav.url))
                for nav in config.nav
            ),
            tags=tuple(self._tags[tag.name] for tag in tags),
        )

    def clone_global(self) -> GlobalVars:
        """Return an independent copy of the shared base variables."""
        return replace(self._global)

    def global_with(self, **overrides: Any) -> GlobalVars:
        """Return the base variables with per-output fields set."""
        return self._global.with_overrides(**overrides)

    def get_tag(self, name: str) -> TagVars | None:
        return self._tags.get(name)

    def _tag_vars(self, name: str) -> TagVars:
        cached = self._tags.get(name)
        if cached is not None:
            return cached
        # pages may carry tags that no post uses
        tag_url = fill_placeholders(self.config.url.tag_link_format, tag=name)
        return TagVars(name=name, url=self.config.root_url(tag_url), posts_count=0)

    def _author_vars(self, document: Document) -> AuthorVars:
        key = document.metadata.author
        cached = self._authors.get(key) if key is not None else None
        if cached is not None:
            return cached
        return AuthorVars.from_author(document.resolved_author)

    def project_post(self, document: Document) -> PostVars:
        """Project a resolved document.

        Raises:
            ProjectionError: The document's author or language was never
                resolved.
        """
        meta = document.metadata
        if document.resolved_author is None or meta.author is None:
            raise ProjectionError(f"{document.source_path}: author is not resolved")
        if meta.language is None:
            raise ProjectionError(f"{document.source_path}: language is not resolved")
        return PostVars(
            title=meta.title,
            permalink=self.config.root_url(document.route_slug),
            date=meta.date,
            updated=meta.updated or meta.date,
            brief=Markup(document.rendered_excerpt),
            content=Markup(document.rendered_body),
            language=meta.language,
            comments=bool(meta.comments),
            tags=tuple(self._tag_vars(name) for name in meta.tags or []),
            datetime=document.publish_time,
            updated_datetime=document.updated_time,
            author=self._author_vars(document),
            meta=MappingProxyType(dict(meta.extra)),
        )

    def project_posts(self, documents: Iterable[Document]) -> tuple[PostVars, ...]:
        return tuple(self.project_post(document) for document in documents)

    def project_pagination(self, window: PageWindow) -> PaginationVars:
        return PaginationVars(
            current=window.current,
            prev=window.prev,
            next=window.next,
            total=window.total,
            total_pages=window.total_pages,
            has_prev=window.has_prev,
            has_next=window.has_next,
            current_url=self.config.root_url(window.current_url),
            prev_url=self.config.root_url(window.prev_url),
            next_url=self.config.root_url(window.next_url),
        )
