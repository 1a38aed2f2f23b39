"""Immutable permission table and optional resource schema."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from rolebaker.errors import PermissionConfigError
from rolebaker.permissions.models import DENIED, PermissionRule, normalize_rule

logger = logging.getLogger(__name__)


def _check_key(key: Any, kind: str, **where: str) -> str:
    if not isinstance(key, str) or not key.strip():
        raise PermissionConfigError(f"{kind} name must be a non-empty string, got {key!r}", **where)
    return key


class ResourceSchema(BaseModel):
    """Declared resources and the actions valid for each of them."""

    model_config = ConfigDict(frozen=True)

    resources: dict[str, tuple[str, ...]]

    @field_validator("resources")
    @classmethod
    def validate_resources(cls, v: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        for resource, actions in v.items():
            if not resource.strip():
                raise ValueError("resource name cannot be empty or whitespace")
            if not actions:
                raise ValueError(f"resource {resource!r} declares no actions")
        return v

    @classmethod
    def from_mapping(cls, resources: Mapping[str, Iterable[str]]) -> ResourceSchema:
        return cls(resources={name: tuple(actions) for name, actions in resources.items()})

    def validate_key(self, resource: str, action: str, role: str | None = None) -> None:
        """Raise PermissionConfigError if resource/action is not declared."""
        actions = self.resources.get(resource)
        if actions is None:
            raise PermissionConfigError(
                f"Unknown resource {resource!r} (declared: {list(self.resources)})",
                role=role, resource=resource,
            )
        if action not in actions:
            raise PermissionConfigError(
                f"Unknown action {action!r} for resource {resource!r} (declared: {list(actions)})",
                role=role, resource=resource, action=action,
            )


class PermissionTable:
    """Frozen role -> resource -> action -> rule mapping.

    Every level is a read-only copy of the caller's mapping, so the table
    cannot change after construction. Key order is preserved.
    """

    def __init__(self, rules: Mapping[str, Mapping[str, Mapping[str, PermissionRule]]]) -> None:
        self._rules = rules

    @classmethod
    def build(
        cls,
        permissions_config: Mapping[str, Any],
        schema: ResourceSchema | None = None,
    ) -> PermissionTable:
        if not isinstance(permissions_config, Mapping):
            raise PermissionConfigError(
                f"Permission table must be a mapping, got {type(permissions_config).__name__}"
            )

        frozen: dict[str, Mapping[str, Mapping[str, PermissionRule]]] = {}
        for role, role_config in permissions_config.items():
            _check_key(role, "Role")
            if role_config is None:
                role_config = {}
            if not isinstance(role_config, Mapping):
                raise PermissionConfigError("Role config must be a mapping", role=role)

            resources: dict[str, Mapping[str, PermissionRule]] = {}
            for resource, actions in role_config.items():
                _check_key(resource, "Resource", role=role)
                if not isinstance(actions, Mapping):
                    raise PermissionConfigError(
                        "Resource config must be a mapping of actions", role=role, resource=resource
                    )
                rules: dict[str, PermissionRule] = {}
                for action, raw in actions.items():
                    _check_key(action, "Action", role=role, resource=resource)
                    if schema is not None:
                        schema.validate_key(resource, action, role=role)
                    try:
                        rules[action] = normalize_rule(raw)
                    except PermissionConfigError as e:
                        raise PermissionConfigError(
                            str(e), role=role, resource=resource, action=action
                        ) from e
                resources[resource] = MappingProxyType(rules)
            frozen[role] = MappingProxyType(resources)

        logger.debug("built permission table with %d roles", len(frozen))
        return cls(MappingProxyType(frozen))

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def role_config(self, role: str) -> Mapping[str, Mapping[str, PermissionRule]] | None:
        try:
            return self._rules.get(role)
        except TypeError:
            # unhashable role value
            return None

    def lookup(self, role: str, resource: str, action: str) -> PermissionRule:
        """Return the rule at (role, resource, action); missing means Denied."""
        try:
            return self._rules.get(role, {}).get(resource, {}).get(action, DENIED)
        except TypeError:
            return DENIED

    def resource_actions(self) -> dict[str, list[str]]:
        """Union of resource -> actions across every role, in discovery order."""
        discovered: dict[str, dict[str, None]] = {}
        for role_config in self._rules.values():
            for resource, actions in role_config.items():
                seen = discovered.setdefault(resource, {})
                for action in actions:
                    seen[action] = None
        return {resource: list(actions) for resource, actions in discovered.items()}


class ActionDescriptions:
    """Frozen resource -> action -> human-readable description mapping."""

    def __init__(self, docs: Mapping[str, Mapping[str, str]]) -> None:
        self._docs = docs

    @classmethod
    def build(
        cls,
        action_docs: Mapping[str, Any],
        schema: ResourceSchema | None = None,
    ) -> ActionDescriptions:
        if not isinstance(action_docs, Mapping):
            raise PermissionConfigError(
                f"Action docs must be a mapping, got {type(action_docs).__name__}"
            )
        frozen: dict[str, Mapping[str, str]] = {}
        for resource, actions in action_docs.items():
            _check_key(resource, "Resource")
            if not isinstance(actions, Mapping):
                raise PermissionConfigError("Action docs entry must be a mapping", resource=resource)
            for action, text in actions.items():
                _check_key(action, "Action", resource=resource)
                if not isinstance(text, str):
                    raise PermissionConfigError(
                        "Action description must be a string", resource=resource, action=action
                    )
                if schema is not None:
                    schema.validate_key(resource, action)
            frozen[resource] = MappingProxyType(dict(actions))
        return cls(MappingProxyType(frozen))

    def get(self, resource: str, action: str) -> str | None:
        return self._docs.get(resource, {}).get(action)
