"""Metadata extractors for Gazette.

This module splits a content document into its front matter and body,
deserializes the front matter, and derives the values the normalizer needs
(publish times and excerpts).

Front matter is recognized only at the very top of the document:

    ---                 +++                 ```toml
    title: YAML         title = "TOML"      title = "TOML"
    ---                 +++                 ```

Key functions:
- extract_frontmatter: Split and deserialize the metadata block.
- parse_time: Parse the three accepted date formats.
- extract_excerpt: Text before the ``<!-- more -->`` separator.
"""

from __future__ import annotations

import tomllib
from datetime import date, datetime
from typing import Any

import yaml

from .errors import TimeFormatError

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

MORE_SEPARATORS = ("<!-- more -->", "<!--more-->")

# opening fence -> (closing fence, format)
FENCES = {
    "---": ("---", "yaml"),
    "+++": ("+++", "toml"),
    "```toml": ("```", "toml"),
}


class FrontmatterError(ValueError):
    """Front matter is present but cannot be deserialized."""


def _deserialize(text: str, fmt: str) -> dict[str, Any]:
    try:
        if fmt == "toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise FrontmatterError(f"invalid {fmt.upper()} front matter: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"{fmt.upper()} front matter must be a mapping")
    return data


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract front matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, trimmed body). Documents without a
        metadata block return an empty dict and the whole text.

    Raises:
        FrontmatterError: The block is unclosed or does not deserialize to
            a mapping.
    """
    text = text.lstrip("\ufeff").strip()
    lines = text.splitlines()
    if not lines or lines[0].rstrip() not in FENCES:
        return {}, text
    closing, fmt = FENCES[lines[0].rstrip()]
    for index in range(1, len(lines)):
        if lines[index].rstrip() == closing:
            meta = _deserialize("\n".join(lines[1:index]), fmt)
            body = "\n".join(lines[index + 1 :]).strip()
            return meta, body
    raise FrontmatterError(f"front matter opened with {lines[0]!r} is never closed")


def parse_time(value: str) -> datetime:
    """Parse a publish/update time.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM-DD HH:MM`` and ``YYYY-MM-DD HH:MM:SS``;
    the shorter forms are right-padded with zeros.

    Raises:
        TimeFormatError: The value has any other shape or is not a real date.
    """
    text = value.strip()
    if len(text) == 10:
        text = f"{text} 00:00:00"
    elif len(text) == 16:
        text = f"{text}:00"
    if len(text) != 19:
        raise TimeFormatError(value)
    try:
        return datetime.strptime(text, TIME_FORMAT)
    except ValueError as exc:
        raise TimeFormatError(value) from exc


def time_text(value: Any) -> str:
    """Return the canonical string form of a front matter date value.

    YAML and TOML turn unquoted dates into date/datetime objects; those are
    converted back so every document carries its dates as text.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None).strftime(TIME_FORMAT)
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def extract_excerpt(body: str) -> str:
    """Return the text before the first ``more`` separator.

    The long separator is searched first; the short one only when the long
    one is absent. A separator at the very start does not count, and a body
    without a separator is its own excerpt.
    """
    for separator in MORE_SEPARATORS:
        index = body.find(separator)
        if index > 0:
            return body[:index].strip()
    return body
