"""Protocol definitions for Gazette.

This module defines the contracts of the collaborators the build pipeline
consumes without owning: the theme engine and the Markdown converter.

These protocols enable:
- Loose coupling between the site planner and Jinja2/mistune
- Easy testing through fake implementations
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .variables import GlobalVars


@runtime_checkable
class ThemeEngine(Protocol):
    """Protocol for rendering named templates against a variable tree.

    Implementations must also expose a ``date_format`` helper to their
    templates (see templates.date_format).
    """

    @abstractmethod
    def render(self, name: str, variables: GlobalVars) -> bytes:
        """Render a template.

        Args:
            name: Template name relative to the theme directory.
            variables: Projected template variables.

        Returns:
            Encoded rendered output.

        Raises:
            TemplateNotFoundError: If the theme has no such template.
            RenderError: If rendering fails.
        """
        ...

    @abstractmethod
    def write(self, name: str, destination: Path, variables: GlobalVars) -> None:
        """Render a template into *destination*, creating parent directories."""
        ...


@runtime_checkable
class MarkdownConverter(Protocol):
    """Protocol for a pure Markdown-to-HTML function."""

    @abstractmethod
    def __call__(self, text: str) -> str:
        ...
