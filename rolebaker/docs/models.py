"""Pydantic models for the permission documentation report."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from rolebaker.permissions.models import RoleMode

ALLOWED = "Allowed"
DENIED = "Denied"
CONDITIONAL_PREFIX = "Conditional: "
NO_DESCRIPTION = "No description provided"

# Non-role columns, in order, at the start of every report row.
FIXED_COLUMNS = ("resourceArea", "permission", "permissionDescription")


def conditional_status(description: str | None) -> str:
    return f"{CONDITIONAL_PREFIX}{description or NO_DESCRIPTION}"


def is_conditional(status: str) -> bool:
    return status.startswith(CONDITIONAL_PREFIX)


class ReportColumn(BaseModel):
    """One header column; role columns carry per-role statuses."""

    model_config = ConfigDict(frozen=True)

    column_name: str
    is_role: bool


class PermissionDocumentationReport(BaseModel):
    """Snapshot of the full permission matrix."""

    model_config = ConfigDict(frozen=True)

    user_role_mode: RoleMode
    report: dict[str, dict[str, dict[str, str]]]
    report_header: list[ReportColumn]
    report_rows: list[list[str]]

    def role_columns(self) -> list[str]:
        return [c.column_name for c in self.report_header if c.is_role]

    def status(self, resource: str, action: str, role: str) -> str:
        return self.report[resource][action][role]

    def to_dict(self) -> dict[str, Any]:
        """Serializable form using the camelCase keys consumers expect."""
        return {
            "userRoleMode": self.user_role_mode.value,
            "report": {
                resource: {action: dict(cells) for action, cells in actions.items()}
                for resource, actions in self.report.items()
            },
            "reportHeader": [
                {"columnName": c.column_name, "isRole": c.is_role} for c in self.report_header
            ],
            "reportRows": [list(row) for row in self.report_rows],
        }
