"""
writer.py

Responsibility: put a complete set of generated files into an output directory.

Rules:
- Write files in sorted path order for deterministic behaviour.
- Stage every file in a temporary directory next to the destination first; the
  destination is only touched once the whole set has been staged.
- Leave files whose content is already identical untouched.
- Output is UTF-8 with "\n" newlines regardless of platform.

This module does not know about languages or templates.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable

from addongen.errors import WriteError
from addongen.generator import GeneratedFile
from addongen.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WriteResult:
    written: int
    unchanged: int


def _relative_path(path: str) -> PurePosixPath:
    rel = PurePosixPath(path)
    if rel.is_absolute() or not rel.parts or ".." in rel.parts:
        raise WriteError(f"Generated file path escapes the output directory: {path!r}")
    return rel


def _is_unchanged(target: Path, content: str) -> bool:
    if not target.is_file():
        return False
    try:
        return target.read_text(encoding="utf-8") == content
    except UnicodeDecodeError:
        return False


def write_generated_files(files: Iterable[GeneratedFile], destination_dir: str | Path) -> WriteResult:
    """
    Write `files` below destination_dir, all or nothing as far as staging goes.

    Raises WriteError on duplicate or escaping paths and on I/O failures.
    """
    dst_dir = Path(destination_dir).resolve()

    ordered = sorted(files, key=lambda f: f.path)
    seen: set[PurePosixPath] = set()
    for f in ordered:
        rel = _relative_path(f.path)
        if rel in seen:
            raise WriteError(f"Duplicate generated file path: {f.path}")
        seen.add(rel)

    pending = [f for f in ordered if not _is_unchanged(dst_dir / _relative_path(f.path), f.content)]
    unchanged = len(ordered) - len(pending)
    if not pending:
        logger.info("%s is up to date (%d file(s))", dst_dir, unchanged)
        return WriteResult(written=0, unchanged=unchanged)

    try:
        dst_dir.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=".addongen-", dir=dst_dir.parent))
    except OSError as e:
        raise WriteError(f"Cannot prepare output directory {dst_dir}: {e}") from e

    try:
        for f in pending:
            staged = staging / _relative_path(f.path)
            staged.parent.mkdir(parents=True, exist_ok=True)
            staged.write_text(f.content, encoding="utf-8", newline="\n")

        for f in pending:
            rel = _relative_path(f.path)
            target = dst_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(staging / rel, target)
            logger.debug("Wrote %s", target)
    except OSError as e:
        raise WriteError(f"Failed writing generated files to {dst_dir}: {e}") from e
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    logger.info("Wrote %d file(s) to %s (%d unchanged)", len(pending), dst_dir, unchanged)
    return WriteResult(written=len(pending), unchanged=unchanged)
