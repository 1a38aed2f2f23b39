"""Render a permission report as markdown, CSV, JSON or YAML text."""

from __future__ import annotations

import csv
import io
import json

import yaml

from rolebaker.docs.models import PermissionDocumentationReport

FORMATS: dict[str, str] = {
    "markdown": "md",
    "csv": "csv",
    "json": "json",
    "yaml": "yaml",
}


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def render_markdown(report: PermissionDocumentationReport) -> str:
    header = [c.column_name for c in report.report_header]
    lines = [
        "| " + " | ".join(_md_cell(h) for h in header) + " |",
        "|" + "|".join(" --- " for _ in header) + "|",
    ]
    for row in report.report_rows:
        lines.append("| " + " | ".join(_md_cell(cell) for cell in row) + " |")
    return "\n".join(lines) + "\n"


def render_csv(report: PermissionDocumentationReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([c.column_name for c in report.report_header])
    writer.writerows(report.report_rows)
    return buf.getvalue()


def render_report(report: PermissionDocumentationReport, fmt: str) -> str:
    """Render ``report`` in one of FORMATS."""
    if fmt == "markdown":
        return render_markdown(report)
    if fmt == "csv":
        return render_csv(report)
    if fmt == "json":
        return json.dumps(report.to_dict(), indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(report.to_dict(), default_flow_style=False, sort_keys=False)
    raise ValueError(f"Unknown report format: {fmt!r} (valid: {list(FORMATS)})")
