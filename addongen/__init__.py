"""
addongen package

Build helpers for packaging add-ons: API client generation and release
bookkeeping.

Key responsibilities are split across modules:
- `description.py`: load the declarative API description into a typed model
- `languages.py`: per-language naming, type mapping and layout tables
- `generator.py`: deterministic, in-memory client generation
- `writer.py`: all-or-nothing writing of generated files
- `repo.py`: lenient `owner/name` repository identity
- `github_client.py`: isolated GitHub REST API interactions (releases, dispatch)
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
