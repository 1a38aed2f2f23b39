"""Docs subsystem: builds, renders and writes permission reports."""

from rolebaker.docs.generator import build_report
from rolebaker.docs.models import PermissionDocumentationReport, ReportColumn
from rolebaker.docs.renderer import render_report
from rolebaker.docs.writer import ReportWriter

__all__ = [
    "PermissionDocumentationReport",
    "ReportColumn",
    "ReportWriter",
    "build_report",
    "render_report",
]
