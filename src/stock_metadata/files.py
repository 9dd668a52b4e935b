"""
Local file discovery for batch submission
"""  # noqa: D200, D212, D415

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .core.types import FilePayload
from .exceptions import FileError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .core.types import ContentType

log = logging.getLogger(__name__)

DEFAULT_EXCLUDE_FILES = {".DS_Store", "Thumbs.db"}


def _matches_content_type(payload: FilePayload, content_type: ContentType) -> bool:
    return payload.mime_type.startswith(f"{content_type}/")


def _expand(path: Path, recursive: bool) -> list[Path]:
    if path.is_file():
        return [path]
    if path.is_dir():
        pattern = path.rglob("*") if recursive else path.glob("*")
        return sorted(
            p
            for p in pattern
            if p.is_file()
            and not p.name.startswith(".")
            and p.name not in DEFAULT_EXCLUDE_FILES
        )
    raise FileError(f"Path does not exist: {path}")


def collect_payloads(
    paths: Iterable[str | Path],
    *,
    content_type: ContentType | None = None,
    recursive: bool = False,
) -> list[FilePayload]:
    """Build payloads from files and directories.

    Directories are expanded (sorted, hidden files skipped). Explicitly named
    files are always kept; files found by directory expansion are kept only
    when their MIME type matches `content_type`, if one is given.

    Raises:
        FileError: If a path does not exist.
    """
    payloads: list[FilePayload] = []
    for raw in paths:
        path = Path(raw)
        explicit = path.is_file()
        for file_path in _expand(path, recursive):
            payload = FilePayload.from_file(file_path)
            if (
                content_type is not None
                and not explicit
                and not _matches_content_type(payload, content_type)
            ):
                log.debug("Skipping %s (%s)", file_path, payload.mime_type)
                continue
            payloads.append(payload)
    return payloads
