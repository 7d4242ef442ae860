"""Site aggregate and output planning for Gazette.

A Site owns everything one build needs: configuration, the loaded posts and
pages, the derived tag index, and the template variable projector. It is
constructed fresh for every build and is read-only once constructed.

Building a site happens in two steps:
1. ``plan()`` enumerates every Output (post pages, listings, tag pages, index,
   pages, archives, 404, feed, sitemap) without touching the disk.
2. ``write()`` renders each Output through the theme, or writes its literal
   content, to every destination it maps to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .assets import AssetPipeline
from .collections import Tag, build_archives, build_tags
from .config import Config
from .content import PAGE, POST, Document, list_documents
from .feeds import RSSGenerator, SitemapEntry, SitemapGenerator
from .pagination import Pagination, PageWindow
from .protocols import MarkdownConverter, ThemeEngine
from .renderers import markdown_to_html
from .templates import Theme
from .utils import fill_placeholders, join_root_url
from .variables import ArchiveVars, GlobalVars, TemplateVariables

logger = logging.getLogger(__name__)

# Outputs below this priority are left out of the sitemap.
MIN_SITEMAP_PRIORITY = 0.01

POST_PRIORITY = 0.8
LISTING_PRIORITY = 0.7
PAGE_PRIORITY = 0.7
INDEX_PRIORITY = 1.0
ARCHIVES_PRIORITY = 0.6
FEED_PRIORITY = 0.8

LISTING_TEMPLATE = "posts.html"
ARCHIVES_TEMPLATE = "archives.html"
NOT_FOUND_TEMPLATE = "404.html"


@dataclass
class Output:
    """One artifact of the build.

    Attributes:
        visit_url: Rooted URL the artifact is served at.
        destinations: Files the artifact is written to.
        variables: Template variables (unused for literal content).
        template_name: Theme template to render.
        content: Literal content; when non-empty it is written verbatim.
        last_modified: Time reported in the sitemap.
        sitemap_priority: Sitemap weight; near-zero outputs are left out.
    """

    visit_url: str
    destinations: list[Path]
    variables: GlobalVars
    last_modified: datetime
    sitemap_priority: float
    template_name: str = ""
    content: str = ""

    @property
    def is_literal(self) -> bool:
        return bool(self.content)

    @property
    def in_sitemap(self) -> bool:
        return self.sitemap_priority >= MIN_SITEMAP_PRIORITY


@dataclass
class Site:
    """Everything one build needs.

    Use ``Site.load`` to read content from disk; the constructor takes
    already-loaded documents and resolves them.

    Attributes:
        config: Site configuration.
        posts: Posts, newest first.
        pages: Standalone pages, newest first.
        theme: Engine rendering the theme's templates.
        markdown: Markdown-to-HTML function.
        tags: Tag index over ``posts``.
        variables: Template variable projector.
    """

    config: Config
    posts: list[Document]
    pages: list[Document]
    theme: ThemeEngine
    markdown: MarkdownConverter = markdown_to_html
    tags: list[Tag] = field(init=False)
    variables: TemplateVariables = field(init=False)

    def __post_init__(self):
        for post in self.posts:
            self._resolve(post)
        for page in self.pages:
            self._resolve(page)
        self.tags = build_tags(self.posts, self.config.url)
        logger.debug("Loaded tags: %d", len(self.tags))
        self.variables = TemplateVariables(
            self.config, self.tags, [*self.posts, *self.pages]
        )

    @classmethod
    def load(
        cls,
        config: Config,
        theme: ThemeEngine | None = None,
        markdown: MarkdownConverter | None = None,
    ) -> Site:
        """Load content and theme from the project directories.

        Raises:
            ParseError: A document is malformed.
            TimeFormatError: A document date cannot be parsed.
            OSError: A file cannot be read.
        """
        posts = list_documents(config.posts_dir, POST)
        logger.info("Loaded posts: %d", len(posts))
        pages = list_documents(config.pages_dir, PAGE)
        logger.info("Loaded pages: %d", len(pages))
        if theme is None:
            theme = Theme(config.theme_dir)
            logger.info("Loaded theme: %s", config.theme_dir)
        return cls(
            config=config,
            posts=posts,
            pages=pages,
            theme=theme,
            markdown=markdown or markdown_to_html,
        )

    def _resolve(self, document: Document) -> None:
        """Route the document, fill author/language and render its Markdown."""
        meta = document.metadata
        site = self.config.site
        if document.is_post:
            published = document.publish_time
            document.route_slug = fill_placeholders(
                self.config.url.post_link_format,
                year=published.year,
                month=f"{published.month:02d}",
                day=f"{published.day:02d}",
                slug=meta.slug,
            )
        else:
            document.route_slug = f"/{meta.slug}"
        if meta.author is None:
            meta.author = site.author
        if meta.language is None:
            meta.language = site.language
        document.resolved_author = self.config.get_author(meta.author)
        document.rendered_body = self.markdown(document.raw_body)
        if document.is_post:
            document.rendered_excerpt = self.markdown(document.derived_excerpt)

    @property
    def latest_update(self) -> datetime:
        """Publish time of the newest post, or now when there are none."""
        if self.posts:
            return self.posts[0].publish_time
        return datetime.now()

    # -- planning -----------------------------------------------------------

    def plan(self, output_dir: Path | None = None) -> list[Output]:
        """Enumerate every output of the build, sitemap last.

        Args:
            output_dir: Root to map destinations into (defaults to the
                configured output directory).
        """
        out = output_dir or self.config.output_dir
        outputs: list[Output] = []
        outputs.extend(self._plan_posts(out))
        outputs.extend(self._plan_post_listings(out))
        outputs.extend(self._plan_pages(out))
        outputs.extend(self._plan_tags(out))
        outputs.append(self._plan_index(out))
        outputs.append(self._plan_archives(out))
        outputs.append(self._plan_not_found(out))
        outputs.append(self._plan_feed(out))
        outputs.append(self._plan_sitemap(out, outputs))
        return outputs

    def _listing_vars(
        self, window: PageWindow, posts: list[Document], **overrides
    ) -> GlobalVars:
        return self.variables.global_with(
            pagination=self.variables.project_pagination(window),
            posts=self.variables.project_posts(posts),
            **overrides,
        )

    def _plan_posts(self, out: Path) -> list[Output]:
        return [
            Output(
                visit_url=self.config.root_url(post.route_slug),
                destinations=[self.config.dist_html_path(post.route_slug, out)],
                variables=self.variables.global_with(
                    post=self.variables.project_post(post)
                ),
                template_name=post.metadata.template,
                last_modified=post.publish_time,
                sitemap_priority=POST_PRIORITY,
            )
            for post in self.posts
        ]

    def _plan_post_listings(self, out: Path) -> list[Output]:
        pagination = Pagination(len(self.posts), self.config.url.per_page_size)
        outputs = []
        for window in pagination.windows(self.config.url.post_page_format):
            posts = self.posts[window.start : window.end]
            outputs.append(
                Output(
                    visit_url=self.config.root_url(window.current_url),
                    destinations=[self.config.dist_html_path(window.current_url, out)],
                    variables=self._listing_vars(window, posts),
                    template_name=LISTING_TEMPLATE,
                    last_modified=posts[0].publish_time,
                    sitemap_priority=LISTING_PRIORITY,
                )
            )
        return outputs

    def _plan_pages(self, out: Path) -> list[Output]:
        return [
            Output(
                visit_url=self.config.root_url(page.route_slug),
                destinations=[self.config.dist_html_path(page.route_slug, out)],
                variables=self.variables.global_with(
                    page=self.variables.project_post(page)
                ),
                template_name=page.metadata.template,
                last_modified=page.updated_time,
                sitemap_priority=PAGE_PRIORITY,
            )
            for page in self.pages
        ]

    def _plan_tags(self, out: Path) -> list[Output]:
        outputs = []
        for tag in self.tags:
            pagination = Pagination(len(tag.posts_index), self.config.url.per_page_size)
            current_tag = self.variables.get_tag(tag.name)
            for window in pagination.windows(tag.page_format):
                posts = [self.posts[i] for i in tag.posts_index[window.start : window.end]]
                destinations = [self.config.dist_html_path(window.current_url, out)]
                if window.current == 1:
                    destinations.append(self.config.dist_html_path(tag.url, out))
                outputs.append(
                    Output(
                        visit_url=self.config.root_url(window.current_url),
                        destinations=destinations,
                        variables=self._listing_vars(
                            window, posts, current_tag=current_tag
                        ),
                        template_name=LISTING_TEMPLATE,
                        last_modified=posts[0].publish_time,
                        sitemap_priority=LISTING_PRIORITY,
                    )
                )
        return outputs

    def _plan_index(self, out: Path) -> Output:
        # the index is the first page of the post listing
        pagination = Pagination(len(self.posts), self.config.url.per_page_size)
        window = pagination.window(1, self.config.url.post_page_format)
        return Output(
            visit_url=self.config.root_url(""),
            destinations=[self.config.dist_html_path("index.html", out)],
            variables=self._listing_vars(window, self.posts[window.start : window.end]),
            template_name=self.config.theme.index_template,
            last_modified=self.latest_update,
            sitemap_priority=INDEX_PRIORITY,
        )

    def _plan_archives(self, out: Path) -> Output:
        archives = tuple(
            ArchiveVars(
                year=archive.year,
                posts=self.variables.project_posts(
                    self.posts[i] for i in archive.posts_index
                ),
            )
            for archive in build_archives(self.posts)
        )
        return Output(
            visit_url=self.config.root_url("archives"),
            destinations=[self.config.dist_html_path("archives", out)],
            variables=self.variables.global_with(archives=archives),
            template_name=ARCHIVES_TEMPLATE,
            last_modified=self.latest_update,
            sitemap_priority=ARCHIVES_PRIORITY,
        )

    def _plan_not_found(self, out: Path) -> Output:
        return Output(
            visit_url=self.config.root_url("404"),
            destinations=[self.config.dist_html_path("404", out)],
            variables=self.variables.clone_global(),
            template_name=NOT_FOUND_TEMPLATE,
            last_modified=self.latest_update,
            sitemap_priority=0.0,
        )

    def _plan_feed(self, out: Path) -> Output:
        feed = RSSGenerator()
        return Output(
            visit_url=self.config.root_url(feed.filename),
            destinations=[self.config.dist_path(feed.filename, out)],
            variables=self.variables.clone_global(),
            content=feed.generate(self.posts, self.config),
            last_modified=self.latest_update,
            sitemap_priority=FEED_PRIORITY,
        )

    def _plan_sitemap(self, out: Path, outputs: list[Output]) -> Output:
        sitemap = SitemapGenerator()
        entries = [
            SitemapEntry(
                loc=join_root_url(self.config.url.base, output.visit_url),
                lastmod=output.last_modified,
                priority=output.sitemap_priority,
            )
            for output in outputs
            if output.in_sitemap
        ]
        return Output(
            visit_url=self.config.root_url(sitemap.filename),
            destinations=[self.config.dist_path(sitemap.filename, out)],
            variables=self.variables.clone_global(),
            content=sitemap.generate(entries, self.config),
            last_modified=self.latest_update,
            sitemap_priority=0.0,
        )

    # -- writing ------------------------------------------------------------

    def write(self, outputs: list[Output]) -> int:
        """Write every destination of every output.

        Returns:
            Number of files written.

        Raises:
            TemplateNotFoundError: A template is missing from the theme.
            RenderError: A template fails to render.
            OSError: A file cannot be written.
        """
        count = 0
        for output in outputs:
            for destination in output.destinations:
                if output.is_literal:
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    destination.write_text(output.content, encoding="utf-8")
                else:
                    self.theme.write(output.template_name, destination, output.variables)
                logger.debug("Generated file: %s", destination)
                count += 1
        return count

    def build(self, output_dir: Path | None = None) -> int:
        """Plan and write every output, then copy static assets.

        Returns:
            Number of generated (non-asset) files.
        """
        out = output_dir or self.config.output_dir
        count = self.write(self.plan(out))
        assets = AssetPipeline(self.config, out).run()
        logger.debug("Generated files: %d, copied assets: %d", count, assets)
        return count
