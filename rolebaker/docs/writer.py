"""ReportWriter — writes rendered permission reports to disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rolebaker.config.models import DocsConfig
from rolebaker.docs.models import PermissionDocumentationReport
from rolebaker.docs.renderer import FORMATS, render_report

logger = logging.getLogger(__name__)


def _sanitize_filename(name: str) -> str:
    """Make a report name safe for use as a filename."""
    name = name.replace("/", "-").replace("\\", "-").replace("..", "")
    name = re.sub(r"[^\w\-\.]", "", name)
    if not name or name.strip(".") == "":
        name = "permissions"
    return name


class ReportWriter:
    """Writes a PermissionDocumentationReport under ``config.base_dir``."""

    def __init__(self, config: DocsConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)

    def path_for(self, fmt: str) -> Path:
        if fmt not in FORMATS:
            raise ValueError(f"Unknown report format: {fmt!r} (valid: {list(FORMATS)})")
        return self.base_dir / f"{_sanitize_filename(self.config.filename)}.{FORMATS[fmt]}"

    def write(
        self,
        report: PermissionDocumentationReport,
        fmt: str | None = None,
        *,
        dry_run: bool = False,
    ) -> Path:
        """Render and write the report. Returns the (would-be) path."""
        fmt = fmt or self.config.format
        dest = self.path_for(fmt)
        content = render_report(report, fmt)

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        logger.info("wrote %s (%d bytes)", dest, len(content))
        return dest
