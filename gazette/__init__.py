"""Gazette static site generator.

This package compiles a directory of Markdown posts and pages plus a Jinja2 theme
into a deployable static site: post pages, paginated listings, tag and archive
pages, an RSS feed and a sitemap.

The main entry point is the CLI module, which provides commands for building the
site, watching it for changes, serving it locally and creating new content files.

Pipeline stages, leaf-first:
- content: loads and normalizes documents.
- collections / pagination: derived tag, archive and pagination indexes.
- variables: projects content into immutable template variables.
- site: plans every output artifact and writes it through the theme.
- watch: debounced, serialized rebuilds on filesystem changes.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
