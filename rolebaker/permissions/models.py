"""Pydantic models for permission rules and principals."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from rolebaker.errors import PermissionConfigError


class RoleMode(str, Enum):
    """Which principal shape an engine expects."""

    SINGLE_ROLE = "singleRole"
    MULTI_ROLE = "multiRole"


Predicate = Callable[[Any, Any], Any]


class Allowed(BaseModel):
    """Rule that always grants."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["allowed"] = "allowed"


class Denied(BaseModel):
    """Rule that always denies."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["denied"] = "denied"


class Conditional(BaseModel):
    """Rule resolved by calling ``check(principal, resource_data)``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["conditional"] = "conditional"
    check: Predicate
    description: str | None = None


PermissionRule = Union[Allowed, Denied, Conditional]

ALLOWED = Allowed()
DENIED = Denied()

# Keys accepted for the predicate of a mapping-style conditional rule.
_CHECK_KEYS = ("check", "check_function", "checkFunction")


def normalize_rule(raw: Any) -> PermissionRule:
    """Turn a raw table value into a tagged permission rule.

    Accepts booleans, Conditional/Allowed/Denied instances, bare callables and
    mappings of the form ``{"check": fn, "description": "..."}``.
    """
    if isinstance(raw, bool):
        return ALLOWED if raw else DENIED
    if isinstance(raw, (Allowed, Denied, Conditional)):
        return raw
    if isinstance(raw, Mapping):
        present = [k for k in _CHECK_KEYS if k in raw]
        if len(present) > 1:
            raise PermissionConfigError(f"Conditional rule has more than one predicate key: {present}")
        check = raw[present[0]] if present else None
        if not callable(check):
            raise PermissionConfigError("Conditional rule needs a callable 'check'")
        unknown = set(raw) - set(_CHECK_KEYS) - {"description"}
        if unknown:
            raise PermissionConfigError(f"Unknown rule keys: {sorted(unknown)}")
        description = raw.get("description")
        if description is not None and not isinstance(description, str):
            raise PermissionConfigError("Rule description must be a string")
        return Conditional(check=check, description=description or None)
    if callable(raw):
        return Conditional(check=raw)
    raise PermissionConfigError(
        f"Invalid permission rule of type {type(raw).__name__}: expected bool, "
        "callable or conditional mapping"
    )


class SingleRoleUser(BaseModel):
    """Principal holding exactly one role."""

    model_config = ConfigDict(extra="allow")

    role: str
    user_id: str | None = None


class MultiRoleUser(BaseModel):
    """Principal holding zero or more roles."""

    model_config = ConfigDict(extra="allow")

    roles: list[str] = Field(default_factory=list)
    user_id: str | None = None


def principal_attr(principal: Any, name: str) -> Any:
    """Read ``name`` from a principal object or mapping; None if absent."""
    if isinstance(principal, Mapping):
        return principal.get(name)
    return getattr(principal, name, None)
