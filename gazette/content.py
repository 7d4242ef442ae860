"""Content processing for Gazette.

This module handles loading of content documents (Markdown files with front
matter) and their normalization into Document records.

Key classes:
- DocumentMetadata: Recognized front matter fields.
- Document: Dataclass representing a post or a page.
- FileContentLoader: Discovers content files in a directory tree.

Key functions:
- parse_document: Build a Document from a source file.
- normalize: Fill metadata defaults, parse dates and derive the excerpt.
- list_documents: Load, normalize and order every document in a directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .config import Author
from .errors import ParseError
from .extractors import (
    FrontmatterError,
    extract_excerpt,
    extract_frontmatter,
    parse_time,
    time_text,
)
from .utils import is_markdown

logger = logging.getLogger(__name__)

POST = "post"
PAGE = "page"

DEFAULT_TEMPLATES = {POST: "post.html", PAGE: "page.html"}

REQUIRED_FIELDS = ("title", "slug", "date")


@dataclass
class DocumentMetadata:
    """Front matter of a document.

    Optional fields stay None until the normalizer fills their defaults.
    Unrecognized keys are kept in ``extra`` for templates.
    """

    title: str
    slug: str
    date: str
    updated: str | None = None
    tags: list[str] | None = None
    template: str | None = None
    language: str | None = None
    comments: bool | None = None
    author: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path) -> DocumentMetadata:
        missing = [name for name in REQUIRED_FIELDS if data.get(name) in (None, "")]
        if missing:
            raise ParseError(path, f"missing required field(s): {', '.join(missing)}")
        tags = data.get("tags")
        if isinstance(tags, str):
            tags = [tags]
        elif tags is not None and not isinstance(tags, list):
            raise ParseError(path, "'tags' must be a list of strings")
        comments = data.get("comments")
        if comments is not None and not isinstance(comments, bool):
            raise ParseError(path, "'comments' must be a boolean")
        updated = data.get("updated")
        known = {
            "title", "slug", "date", "updated", "tags",
            "template", "language", "comments", "author",
        }
        return cls(
            title=str(data["title"]),
            slug=str(data["slug"]),
            date=time_text(data["date"]),
            updated=time_text(updated) if updated not in (None, "") else None,
            tags=[str(tag) for tag in tags] if tags is not None else None,
            template=data.get("template"),
            language=data.get("language"),
            comments=comments,
            author=data.get("author"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class Document:
    """A post or page loaded from one source file.

    Attributes:
        metadata: Front matter fields.
        raw_body: Markdown body without front matter.
        derived_excerpt: Markdown before the ``more`` separator (posts only).
        rendered_body: HTML of the body.
        rendered_excerpt: HTML of the excerpt (posts only).
        publish_time: Parsed ``date``.
        updated_time: Parsed ``updated`` (defaults to ``date``).
        resolved_author: Author record looked up from the site's author table.
        route_slug: URL path the document is published at.
        source_path: Path to the source file.
        kind: "post" or "page".
    """

    metadata: DocumentMetadata
    raw_body: str
    source_path: Path
    kind: str = POST
    derived_excerpt: str = ""
    rendered_body: str = ""
    rendered_excerpt: str = ""
    publish_time: datetime | None = None
    updated_time: datetime | None = None
    resolved_author: Author | None = None
    route_slug: str = ""

    @property
    def is_post(self) -> bool:
        return self.kind == POST


class FileContentLoader:
    """Discovers content files in a directory tree.

    Attributes:
        directory: Directory to walk recursively.
    """

    def __init__(self, directory: Path):
        self.directory = directory

    def iter_files(self) -> list[Path]:
        """Return every Markdown file below the directory in walk order."""
        if not self.directory.is_dir():
            return []
        return [
            path
            for path in sorted(self.directory.rglob("*"))
            if path.is_file() and is_markdown(path)
        ]


def parse_document(path: Path, kind: str = POST) -> Document:
    """Build a Document from a source file.

    Raises:
        ParseError: Front matter is malformed or lacks a required field.
        OSError: The file cannot be read.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data, body = extract_frontmatter(text)
    except FrontmatterError as exc:
        raise ParseError(path, str(exc), exc) from exc
    metadata = DocumentMetadata.from_dict(data, path)
    return Document(metadata=metadata, raw_body=body, source_path=path, kind=kind)


def normalize(document: Document) -> Document:
    """Fill metadata defaults, parse dates and derive the excerpt in place.

    Rules are applied in order: strip the slug's leading ``/``, default the
    template, default comments to on, default ``updated`` to ``date``,
    default tags to an empty list, parse both dates, and compute the excerpt.

    Raises:
        ParseError: The slug is empty once its leading separator is removed.
        TimeFormatError: ``date`` or ``updated`` is not an accepted format.
    """
    meta = document.metadata
    meta.slug = meta.slug.lstrip("/")
    if not meta.slug:
        raise ParseError(document.source_path, "'slug' must not be empty")
    if meta.template is None:
        meta.template = DEFAULT_TEMPLATES[document.kind]
    if meta.comments is None:
        meta.comments = True
    if meta.updated is None:
        meta.updated = meta.date
    if meta.tags is None:
        meta.tags = []

    document.publish_time = parse_time(meta.date)
    document.updated_time = parse_time(meta.updated)

    # pages are never listed, so they carry no excerpt
    if document.is_post:
        document.derived_excerpt = extract_excerpt(document.raw_body)
    return document


def list_documents(directory: Path, kind: str = POST) -> list[Document]:
    """Load every document in *directory*, newest first.

    Documents with the same publish time keep their walk order.

    Args:
        directory: Directory to walk recursively.
        kind: "post" or "page".

    Returns:
        Normalized documents sorted by publish time, descending.
    """
    documents = [
        normalize(parse_document(path, kind))
        for path in FileContentLoader(directory).iter_files()
    ]
    documents.sort(key=lambda doc: doc.publish_time, reverse=True)
    logger.debug("Loaded %d %s(s) from %s", len(documents), kind, directory)
    return documents
