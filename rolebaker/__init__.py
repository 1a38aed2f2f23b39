"""RoleBaker - role and attribute based permission checks with generated docs."""

from rolebaker.config import RoleBakerConfig, load_config
from rolebaker.docs import PermissionDocumentationReport, ReportWriter, render_report
from rolebaker.engine import (
    BakedAuthorization,
    bake_authorization,
    bake_multi_role,
    bake_single_role,
)
from rolebaker.errors import MissingActionDocsError, PermissionConfigError, RoleBakerError
from rolebaker.permissions import (
    Allowed,
    Conditional,
    Denied,
    MultiRoleUser,
    RoleMode,
    SingleRoleUser,
)

__version__ = "0.1.0"

__all__ = [
    "Allowed",
    "BakedAuthorization",
    "Conditional",
    "Denied",
    "MissingActionDocsError",
    "MultiRoleUser",
    "PermissionConfigError",
    "PermissionDocumentationReport",
    "ReportWriter",
    "RoleBakerConfig",
    "RoleBakerError",
    "RoleMode",
    "SingleRoleUser",
    "bake_authorization",
    "bake_multi_role",
    "bake_single_role",
    "load_config",
    "render_report",
]
