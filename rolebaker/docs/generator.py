"""Builds the permission documentation report from a permission table."""

from __future__ import annotations

import logging

from rolebaker.docs.models import (
    ALLOWED,
    DENIED,
    FIXED_COLUMNS,
    PermissionDocumentationReport,
    ReportColumn,
    conditional_status,
)
from rolebaker.errors import MissingActionDocsError
from rolebaker.permissions.models import Allowed, Conditional, RoleMode
from rolebaker.permissions.table import ActionDescriptions, PermissionTable

logger = logging.getLogger(__name__)


def _cell_status(table: PermissionTable, role: str, resource: str, action: str) -> str:
    role_config = table.role_config(role) or {}
    resource_config = role_config.get(resource)
    if resource_config is None:
        return DENIED
    rule = resource_config.get(action)
    if rule is None:
        return DENIED
    if isinstance(rule, Conditional):
        return conditional_status(rule.description)
    return ALLOWED if isinstance(rule, Allowed) else DENIED


def build_report(
    mode: RoleMode,
    table: PermissionTable,
    action_docs: ActionDescriptions | None,
) -> PermissionDocumentationReport:
    """Walk the whole table and produce the documentation report.

    Every (resource, action) pair configured under any role becomes a row,
    with one status cell per role in table order. Raises
    MissingActionDocsError when descriptions are absent or incomplete.
    """
    if action_docs is None:
        raise MissingActionDocsError()

    roles = table.roles
    resource_actions = table.resource_actions()
    pairs = [(resource, action) for resource, actions in resource_actions.items() for action in actions]

    missing = [(r, a) for r, a in pairs if action_docs.get(r, a) is None]
    if missing:
        raise MissingActionDocsError(missing)

    # Resources with no configured actions still get an (empty) entry.
    report: dict[str, dict[str, dict[str, str]]] = {resource: {} for resource in resource_actions}
    rows: list[list[str]] = []
    for resource, action in pairs:
        cells = {role: _cell_status(table, role, resource, action) for role in roles}
        report[resource][action] = cells
        rows.append([resource, action, action_docs.get(resource, action), *cells.values()])

    header = [ReportColumn(column_name=name, is_role=False) for name in FIXED_COLUMNS]
    header += [ReportColumn(column_name=role, is_role=True) for role in roles]

    logger.debug("generated permission docs: %d rows x %d roles", len(rows), len(roles))
    return PermissionDocumentationReport(
        user_role_mode=mode,
        report=report,
        report_header=header,
        report_rows=rows,
    )
