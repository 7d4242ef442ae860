"""Site configuration for Gazette.

Configuration is read from ``gazette.yaml`` in the project root. Every section
is optional; missing keys fall back to the defaults below. The resulting
Config object also owns the URL and output-path rules shared by the pipeline.

Key classes:
- Config: Full project configuration with URL/path helpers.
- Author: Entry in the site's author table.

Key functions:
- load_config: Load configuration from gazette.yaml.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, OutputPathError
from .utils import join_root_url

CONFIG_FILENAME = "gazette.yaml"


@dataclass
class Author:
    """An author from the site's author table.

    Attributes:
        name: Display name.
        email: Email address, used for Gravatar avatars.
        website: Personal site URL.
        bio: Short biography.
        avatar: Avatar image URL.
        use_gravatar: Derive the avatar from the email through Gravatar.
        social: Mapping of network name to profile URL.
    """

    name: str
    email: str = ""
    website: str = ""
    bio: str = ""
    avatar: str = ""
    use_gravatar: bool = False
    social: dict[str, str] = field(default_factory=dict)

    @property
    def avatar_url(self) -> str:
        if not self.use_gravatar:
            return self.avatar
        digest = hashlib.md5(self.email.encode("utf-8")).hexdigest()
        return f"https://www.gravatar.com/avatar/{digest}"


@dataclass
class SiteConfig:
    title: str = "Gazette"
    subtitle: str = "a simple static site generator"
    description: str = "Build your content into static websites and blogs"
    keywords: list[str] = field(default_factory=lambda: ["blog", "static", "website"])
    language: str = "en"
    author: str = "admin"


@dataclass
class UrlConfig:
    base: str = "http://localhost:19292"
    root: str = "/"
    post_link_format: str = "/:year/:month/:day/:slug"
    post_page_format: str = "/page/:page"
    per_page_size: int = 10
    tag_link_format: str = "/tag/:tag"
    tag_page_format: str = "/tag/:tag/page/:page"


@dataclass
class DirectoryConfig:
    source: str = "source"
    output: str = "dist"
    themes: str = "themes"
    assets: list[str] = field(default_factory=lambda: ["assets"])


@dataclass
class ThemeConfig:
    name: str = "default"
    index_template: str = "posts.html"
    assets_dir: list[str] = field(default_factory=lambda: ["static"])


@dataclass
class ServerConfig:
    port: int = 19292
    ws_port: int | None = None


@dataclass
class NavLink:
    name: str
    url: str


def _default_navs() -> list[NavLink]:
    return [NavLink(name="About", url="/about")]


@dataclass
class Config:
    """Full project configuration.

    Attributes:
        project_root: Directory containing gazette.yaml; relative directories
            resolve against it.
        site: Site identity (title, language, default author).
        url: URL formats and pagination size.
        directory: Source, output, theme and asset directories.
        theme: Active theme and its index template.
        server: Dev server ports.
        nav: Navigation links.
        authors: Author table keyed by the name used in front matter.
    """

    project_root: Path = field(default_factory=Path.cwd)
    site: SiteConfig = field(default_factory=SiteConfig)
    url: UrlConfig = field(default_factory=UrlConfig)
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    nav: list[NavLink] = field(default_factory=_default_navs)
    authors: dict[str, Author] = field(default_factory=dict)

    @property
    def source_dir(self) -> Path:
        return self.project_root / self.directory.source

    @property
    def posts_dir(self) -> Path:
        return self.source_dir / "posts"

    @property
    def pages_dir(self) -> Path:
        return self.source_dir / "pages"

    @property
    def theme_dir(self) -> Path:
        return self.project_root / self.directory.themes / self.theme.name

    @property
    def output_dir(self) -> Path:
        return self.project_root / self.directory.output

    def get_author(self, name: str) -> Author:
        """Look up an author by key, falling back to a bare author named *name*."""
        return self.authors.get(name) or Author(name=name)

    def root_url(self, path: str) -> str:
        """Return *path* prefixed with the configured URL root."""
        return join_root_url(self.url.root, path)

    def full_url(self, path: str) -> str:
        """Return the absolute URL of *path* on the configured base URL."""
        return join_root_url(self.url.base, self.root_url(path))

    def dist_path(self, url: str, output_dir: Path | None = None) -> Path:
        """Map a URL to a file inside the output directory.

        Raises:
            OutputPathError: The URL resolves outside the output directory.
        """
        base = output_dir or self.output_dir
        target = base / url.strip("/")
        if not target.resolve().is_relative_to(base.resolve()):
            raise OutputPathError(url, base)
        return target

    def dist_html_path(self, url: str, output_dir: Path | None = None) -> Path:
        """Map a page URL to its HTML file.

        URLs that already name a file (``.html``/``.xml``) are kept as is;
        anything else becomes ``<url>/index.html``.
        """
        target = self.dist_path(url, output_dir)
        if target.suffix in (".html", ".xml"):
            return target
        return target / "index.html"

    def asset_dirs(self, output_dir: Path | None = None) -> list[tuple[Path, Path]]:
        """Return (source, destination) pairs of static directories to copy."""
        base = output_dir or self.output_dir
        pairs = [
            (self.project_root / name, base / Path(name).name)
            for name in self.directory.assets
        ]
        pairs.extend(
            (self.theme_dir / name, base / Path(name).name)
            for name in self.theme.assets_dir
        )
        return pairs


def _section(raw: dict[str, Any], name: str, cls):
    """Build a config section dataclass from a mapping, ignoring unknown keys."""
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in value.items() if k in known})


def config_from_dict(raw: dict[str, Any], project_root: Path) -> Config:
    """Build a Config from an already-parsed mapping.

    Args:
        raw: Parsed configuration mapping.
        project_root: Root directory of the project.

    Returns:
        Config with defaults applied.
    """
    config = Config(
        project_root=project_root,
        site=_section(raw, "site", SiteConfig),
        url=_section(raw, "url", UrlConfig),
        directory=_section(raw, "directory", DirectoryConfig),
        theme=_section(raw, "theme", ThemeConfig),
        server=_section(raw, "server", ServerConfig),
    )
    if "nav" in raw:
        navs = raw.get("nav") or []
        if not isinstance(navs, list):
            raise ConfigError("'nav' must be a list")
        for n in navs:
            if not isinstance(n, dict) or "name" not in n or "url" not in n:
                raise ConfigError(f"nav entry must be a mapping with name and url: {n!r}")
        config.nav = [NavLink(name=str(n["name"]), url=str(n["url"])) for n in navs]
    authors = raw.get("authors") or {}
    if not isinstance(authors, dict):
        raise ConfigError("'authors' section must be a mapping")
    known = {f.name for f in fields(Author)}
    for key, value in authors.items():
        if value is not None and not isinstance(value, dict):
            raise ConfigError(f"author '{key}' must be a mapping")
        value = dict(value or {})
        value.setdefault("name", key)
        config.authors[key] = Author(**{k: v for k, v in value.items() if k in known})
    size = config.url.per_page_size
    if not isinstance(size, int) or isinstance(size, bool):
        raise ConfigError(f"url.per_page_size must be an integer, got {size!r}")
    if size < 1:
        raise ConfigError("url.per_page_size must be at least 1")
    return config


def load_config(project_root: Path) -> Config:
    """Load site configuration from gazette.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Config with defaults applied. A missing file yields the defaults.
    """
    config_path = project_root / CONFIG_FILENAME
    raw: Any = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{config_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path}: top level must be a mapping")
    return config_from_dict(raw, project_root)
