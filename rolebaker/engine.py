"""Decision engine: bakes a permission table into has_permission/generate_permission_docs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, NamedTuple

from rolebaker.docs.generator import build_report
from rolebaker.docs.models import PermissionDocumentationReport
from rolebaker.permissions.models import Conditional, PermissionRule, RoleMode, principal_attr
from rolebaker.permissions.table import ActionDescriptions, PermissionTable, ResourceSchema

logger = logging.getLogger(__name__)

HasPermission = Callable[..., bool]


class BakedAuthorization(NamedTuple):
    """The two operations bound over one fixed configuration."""

    has_permission: HasPermission
    generate_permission_docs: Callable[[], PermissionDocumentationReport]
    mode: RoleMode
    table: PermissionTable


def evaluate_rule(rule: PermissionRule, principal: Any, resource_data: Any = None) -> bool:
    """Resolve one rule for a principal.

    Conditional predicates grant only when they return exactly True; any
    other result denies. Exceptions from predicates are not caught.
    """
    if isinstance(rule, Conditional):
        return rule.check(principal, resource_data) is True
    return rule.kind == "allowed"


def bake_authorization(
    user_role_mode: RoleMode | str,
    permissions_config: Mapping[str, Any],
    action_docs: Mapping[str, Mapping[str, str]] | None = None,
    resources: Mapping[str, Iterable[str]] | None = None,
) -> BakedAuthorization:
    """Build the permission check and docs generator for a permission table.

    ``resources`` optionally declares resource -> actions; when given, any
    table or description key outside it is rejected here instead of being
    silently denied later.
    """
    mode = RoleMode(user_role_mode)
    schema = ResourceSchema.from_mapping(resources) if resources is not None else None
    table = PermissionTable.build(permissions_config, schema)
    descriptions = ActionDescriptions.build(action_docs, schema) if action_docs is not None else None

    def _role_grants(role: Any, principal: Any, resource: str, action: str, resource_data: Any) -> bool:
        return evaluate_rule(table.lookup(role, resource, action), principal, resource_data)

    def has_permission(
        principal: Any,
        resource: str,
        action: str,
        resource_data: Any = None,
    ) -> bool:
        if principal is None:
            return False

        if mode is RoleMode.MULTI_ROLE:
            roles = principal_attr(principal, "roles")
            if not roles:
                logger.debug("denied %s.%s: principal holds no roles", resource, action)
                return False
            if isinstance(roles, (str, bytes)):
                logger.debug("denied %s.%s: roles must be a sequence, got a string", resource, action)
                return False
            return any(
                _role_grants(role, principal, resource, action, resource_data) for role in roles
            )

        role = principal_attr(principal, "role")
        if not role:
            logger.debug("denied %s.%s: principal has no role", resource, action)
            return False
        return _role_grants(role, principal, resource, action, resource_data)

    def generate_permission_docs() -> PermissionDocumentationReport:
        return build_report(mode, table, descriptions)

    return BakedAuthorization(
        has_permission=has_permission,
        generate_permission_docs=generate_permission_docs,
        mode=mode,
        table=table,
    )


def bake_single_role(
    permissions_config: Mapping[str, Any],
    action_docs: Mapping[str, Mapping[str, str]] | None = None,
    resources: Mapping[str, Iterable[str]] | None = None,
) -> BakedAuthorization:
    return bake_authorization(RoleMode.SINGLE_ROLE, permissions_config, action_docs, resources)


def bake_multi_role(
    permissions_config: Mapping[str, Any],
    action_docs: Mapping[str, Mapping[str, str]] | None = None,
    resources: Mapping[str, Iterable[str]] | None = None,
) -> BakedAuthorization:
    return bake_authorization(RoleMode.MULTI_ROLE, permissions_config, action_docs, resources)
