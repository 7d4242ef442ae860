"""Exception taxonomy for Gazette.

Every failure raised by the build pipeline derives from GazetteError so callers
(the CLI and the watch loop) can report pipeline failures uniformly. Filesystem
failures are not wrapped and surface as OSError.
"""

from __future__ import annotations

from pathlib import Path


class GazetteError(Exception):
    """Base class for all Gazette build errors."""


class ConfigError(GazetteError):
    """The project configuration file is malformed."""


class ParseError(GazetteError):
    """A content document could not be parsed.

    Attributes:
        source_path: Path to the document that failed.
        message: Human-readable error message.
        original_error: The underlying exception, when there is one.
    """

    def __init__(
        self,
        source_path: Path | str,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = Path(source_path)
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class TimeFormatError(GazetteError):
    """A date string is not in one of the accepted formats."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"time string is not valid: {value!r}")


class TemplateNotFoundError(GazetteError):
    """The theme has no template with the requested name."""

    def __init__(self, template_name: str):
        self.template_name = template_name
        super().__init__(f"template not found: {template_name}")


class RenderError(GazetteError):
    """A template failed while rendering.

    Attributes:
        template_name: Name of the template being rendered.
        message: Human-readable error message.
    """

    def __init__(self, template_name: str, message: str):
        self.template_name = template_name
        self.message = message
        super().__init__(f"{template_name}: {message}")


class ProjectionError(GazetteError):
    """A document reached projection without its author or language resolved."""


class OutputPathError(GazetteError):
    """A generated URL maps to a file outside the output directory."""

    def __init__(self, url: str, output_dir: Path):
        self.url = url
        self.output_dir = output_dir
        super().__init__(f"URL {url!r} escapes the output directory {output_dir}")
