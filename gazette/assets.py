"""Static asset copying for Gazette.

Project asset directories (``directory.assets``) and the theme's static
directories (``theme.assets_dir``) are copied verbatim into the output root,
keeping their directory names: ``assets/`` becomes ``<output>/assets/`` and
``themes/default/static/`` becomes ``<output>/static/``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .config import Config

logger = logging.getLogger(__name__)


class AssetPipeline:
    """Copies static assets into the build output.

    Attributes:
        config: Site configuration naming the asset directories.
        output_dir: Directory where assets are placed.
    """

    def __init__(self, config: Config, output_dir: Path):
        self.config = config
        self.output_dir = output_dir

    def run(self) -> int:
        """Copy every existing asset directory.

        Returns:
            Number of files copied.

        Raises:
            OSError: If a copy fails.
        """
        copied = 0
        for source, destination in self.config.asset_dirs(self.output_dir):
            if not source.is_dir():
                logger.debug("Skipped %s, it does not exist", source)
                continue
            for item in source.rglob("*"):
                if item.is_dir():
                    continue
                dest = destination / item.relative_to(source)
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(item, dest)
                copied += 1
            logger.debug("Copied %s to %s", source, destination)
        return copied
