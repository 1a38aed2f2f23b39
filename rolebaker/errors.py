"""Exceptions raised by RoleBaker."""

from __future__ import annotations


class RoleBakerError(Exception):
    """Base class for errors raised by RoleBaker itself."""


class PermissionConfigError(RoleBakerError):
    """Raised when a permission table or description table is malformed."""

    def __init__(
        self,
        message: str,
        role: str | None = None,
        resource: str | None = None,
        action: str | None = None,
    ) -> None:
        self.role = role
        self.resource = resource
        self.action = action
        where = "/".join(str(p) for p in (role, resource, action) if p is not None)
        super().__init__(f"{message} (at {where})" if where else message)


class MissingActionDocsError(RoleBakerError):
    """Raised when permission docs are generated without action descriptions."""

    def __init__(self, missing: list[tuple[str, str]] | None = None) -> None:
        self.missing = missing or []
        if self.missing:
            pairs = ", ".join(f"{r}.{a}" for r, a in self.missing)
            msg = f"No action description for: {pairs}"
        else:
            msg = "Cannot generate permission docs: no action_docs were provided"
        super().__init__(msg)
