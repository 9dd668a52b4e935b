"""CSV export of completed results.

The layout matches what Adobe Stock's bulk metadata upload expects: a header
row, every field double-quoted, embedded quotes doubled and keywords joined
with semicolons.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from stock_metadata.constants import (
    CSV_HEADER,
    CSV_KEYWORD_SEPARATOR,
    DEFAULT_EXPORT_FILENAME,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stock_metadata.core.types import MetadataResult

log = logging.getLogger(__name__)


def render_csv(results: Sequence[MetadataResult]) -> str:
    """Render results as CSV text, header first, one row per result."""
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(
        (r.file_name, r.title, CSV_KEYWORD_SEPARATOR.join(r.keywords), r.category)
        for r in results
    )
    return buf.getvalue().removesuffix("\n")


def export_csv(
    results: Sequence[MetadataResult],
    path: str | Path = DEFAULT_EXPORT_FILENAME,
) -> Path | None:
    """Write results to `path`.

    Returns:
        The written path, or None when there is nothing to export (no file
        is created in that case).
    """
    if not results:
        log.info("No completed results to export.")
        return None
    target = Path(path)
    target.write_text(render_csv(results), encoding="utf-8")
    log.info("Exported %d result(s) to %s", len(results), target)
    return target
