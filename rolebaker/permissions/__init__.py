"""Permission table model: rules, principals and the frozen table."""

from rolebaker.permissions.models import (
    Allowed,
    Conditional,
    Denied,
    MultiRoleUser,
    PermissionRule,
    RoleMode,
    SingleRoleUser,
    normalize_rule,
)
from rolebaker.permissions.table import ActionDescriptions, PermissionTable, ResourceSchema

__all__ = [
    "ActionDescriptions",
    "Allowed",
    "Conditional",
    "Denied",
    "MultiRoleUser",
    "PermissionRule",
    "PermissionTable",
    "ResourceSchema",
    "RoleMode",
    "SingleRoleUser",
    "normalize_rule",
]
