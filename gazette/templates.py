"""Theme rendering engine for Gazette.

This module uses Jinja2 to render the theme's templates against projected
template variables. Template names are paths relative to the theme directory
(``post.html``, ``posts.html``, ``partials/header.html``...).

Key class:
- Theme: Loads a theme directory and renders named templates.

Key function:
- date_format: The date helper exposed to templates.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from .errors import RenderError, TemplateNotFoundError
from .variables import GlobalVars

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIXES = (".html", ".xml", ".jinja")


def date_format(value: datetime | date, fmt: str = "%Y-%m-%d") -> str:
    """Format a timestamp for templates.

    Usable both as a filter (``{{ post.datetime | date_format("%b %d") }}``)
    and as a function (``{{ date_format(post.datetime) }}``).
    """
    return value.strftime(fmt)


class Theme:
    """Template rendering engine using Jinja2.

    Attributes:
        theme_dir: Directory containing the theme's templates.
        env: Jinja2 environment.
    """

    def __init__(self, theme_dir: Path):
        """Initialize the theme.

        Args:
            theme_dir: Directory with templates.
        """
        self.theme_dir = theme_dir
        self.env = Environment(
            loader=FileSystemLoader(str(theme_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            enable_async=False,
        )
        self._install_globals()
        for name in self.template_names():
            logger.debug("Loaded template: %s", name)

    def _install_globals(self) -> None:
        """Install global helpers in the Jinja environment."""
        self.env.filters["date_format"] = date_format
        self.env.globals["date_format"] = date_format

    def template_names(self) -> list[str]:
        """Return the names of every template the theme provides."""
        return self.env.list_templates(
            filter_func=lambda name: name.endswith(TEMPLATE_SUFFIXES)
        )

    def render(self, name: str, variables: GlobalVars) -> bytes:
        """Render a template to UTF-8 bytes.

        Args:
            name: Template name relative to the theme directory.
            variables: Projected template variables.

        Raises:
            TemplateNotFoundError: If the theme has no such template.
            RenderError: If the template fails to compile or render.
        """
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as exc:
            # the missing name may be an include inside the template
            if exc.name != name:
                raise RenderError(name, f"included template not found: {exc.name}") from exc
            raise TemplateNotFoundError(name) from exc
        except TemplateError as exc:
            raise RenderError(name, _format_error_message(exc)) from exc
        try:
            return template.render(**variables.as_context()).encode("utf-8")
        except TemplateNotFound as exc:
            raise RenderError(name, f"included template not found: {exc.name}") from exc
        except Exception as exc:
            raise RenderError(name, _format_error_message(exc)) from exc

    def write(self, name: str, destination: Path, variables: GlobalVars) -> None:
        """Render a template into *destination*, creating parent directories."""
        content = self.render(name, variables)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateSyntaxError":
        return f"Template syntax error on line {exc.lineno}: {exc.message}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"
