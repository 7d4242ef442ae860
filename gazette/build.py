"""Site building functionality for Gazette.

This module contains the orchestration around a single build: loading the
configuration, constructing a fresh Site, and writing it out.

Key functions and classes:
- build_site: Build the site once, writing straight into a directory.
- SiteBuilder: Repeated builds (watch/serve mode). Each build goes to a
  staging directory that replaces the output directory only on success, and
  the last successful BuildResult is kept.
"""

from __future__ import annotations

import logging
import shutil
import threading
from dataclasses import dataclass
from pathlib import Path

from .config import Config, load_config
from .site import Site
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        site: The Site the build was made from.
        output_dir: Directory where the site was built.
        files_written: Number of generated files (assets not included).
    """

    site: Site
    output_dir: Path
    files_written: int


def build_site(
    project_root: Path,
    clean_output: bool = False,
    output_dir_override: Path | None = None,
    config: Config | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional directory to write the build to instead
            of the configured output directory.
        config: Already-loaded configuration (read from gazette.yaml when
            omitted).

    Returns:
        BuildResult for the new site.

    Raises:
        GazetteError: A document, date or template is invalid.
        OSError: A file cannot be read or written.
    """
    config = config or load_config(project_root)
    output_dir = output_dir_override or config.output_dir
    # load before touching the output so a bad document leaves it intact
    site = Site.load(config)
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
    files = site.build(output_dir)
    logger.debug("Built %d files into %s", files, output_dir)
    return BuildResult(site=site, output_dir=output_dir, files_written=files)


class SiteBuilder:
    """Builds a project repeatedly, publishing each build atomically.

    Builds are written to ``<output>.staging`` and swapped into place only
    when they succeed, so a failed build leaves the previous output and
    ``current`` untouched. ``rebuild`` calls are serialized.

    Attributes:
        project_root: Root directory of the project.
        output_dir: Published output directory.
        current: Result of the last successful build.
    """

    def __init__(self, project_root: Path, output_dir: Path | None = None):
        self.project_root = project_root
        self._output_override = output_dir
        self.current: BuildResult | None = None
        self._lock = threading.Lock()

    @property
    def output_dir(self) -> Path:
        if self._output_override is not None:
            return self._output_override
        return load_config(self.project_root).output_dir

    def rebuild(self) -> BuildResult:
        """Build into staging and publish the result.

        Raises:
            GazetteError: The build failed; the published output is unchanged.
            OSError: A file cannot be read or written.
        """
        with self._lock:
            config = load_config(self.project_root)
            output_dir = self._output_override or config.output_dir
            staging = output_dir.with_name(output_dir.name + ".staging")
            try:
                result = build_site(
                    self.project_root,
                    clean_output=True,
                    output_dir_override=staging,
                    config=config,
                )
            except Exception:
                shutil.rmtree(staging, ignore_errors=True)
                raise
            self._activate_staging(staging, output_dir)
            self.current = BuildResult(
                site=result.site,
                output_dir=output_dir,
                files_written=result.files_written,
            )
            return self.current

    @staticmethod
    def _activate_staging(staging: Path, target: Path) -> None:
        """Replace *target* with *staging*."""
        previous = target.with_name(target.name + ".previous")
        if previous.exists():
            shutil.rmtree(previous)
        if target.exists():
            target.rename(previous)
        staging.rename(target)
        if previous.exists():
            shutil.rmtree(previous)
