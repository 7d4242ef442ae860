"""Utility functions for Gazette.

This module contains small helpers used throughout the Gazette codebase:
URL joining, `:placeholder` substitution for URL formats, path predicates and
filename-to-title conversion.

Key functions:
    join_root_url: Join a base URL with a path.
    fill_placeholders: Substitute `:name` placeholders in a URL format.
    slugify: Convert file names to URL slugs.
    titleize: Convert file names to human-readable titles.
    is_markdown: Check if a path is a Markdown file.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog) or root path.
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about')
        'https://example.com/about'

        >>> join_root_url('/', 'about')
        '/about'
    """
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def fill_placeholders(url_format: str, **values: object) -> str:
    """Replace `:name` placeholders in a URL format.

    Args:
        url_format: Format such as ``/tag/:tag/page/:page``.
        **values: Placeholder values keyed by name.

    Returns:
        The format with every given placeholder substituted. Placeholders
        without a value are left in place.
    """
    result = url_format
    for key, value in values.items():
        result = result.replace(f":{key}", str(value))
    return result


def slugify(name: str) -> str:
    """Convert a file name (without extension) to a URL slug.

    Args:
        name: File stem or relative path.

    Returns:
        URL-friendly slug.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9/]+", "-", name)
    cleaned = cleaned.replace("/", "-").strip("-").lower()
    return cleaned or "untitled"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Examples:
        >>> titleize("hello-world.md")
        'Hello World'
    """
    base = Path(filename).stem
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file (case-insensitive ``.md``)."""
    return path.suffix.lower() == ".md"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)
