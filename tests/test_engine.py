"""Tests for the decision engine: single-role, multi-role and fail-closed paths."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest

from rolebaker.engine import BakedAuthorization, bake_authorization, evaluate_rule
from rolebaker.permissions.models import (
    ALLOWED,
    DENIED,
    Conditional,
    MultiRoleUser,
    RoleMode,
    SingleRoleUser,
)


# -- Single-role mode ---------------------------------------------------------


class TestSingleRole:
    def test_admin_has_full_access(self, single_role):
        admin = SingleRoleUser(role="admin", user_id="admin1")
        for action in ("read", "write", "delete"):
            assert single_role.has_permission(admin, "todos", action) is True

    def test_moderator_only_reads(self, single_role):
        moderator = SingleRoleUser(role="moderator", user_id="mod1")
        assert single_role.has_permission(moderator, "todos", "read") is True
        assert single_role.has_permission(moderator, "todos", "write") is False
        assert single_role.has_permission(moderator, "todos", "delete") is False

    def test_author_can_delete_own_todo(self, single_role, todo):
        user = SingleRoleUser(role="user", user_id="u1")
        assert single_role.has_permission(user, "todos", "delete", todo) is True

    def test_non_author_cannot_delete(self, single_role, todo):
        user = SingleRoleUser(role="user", user_id="u2")
        assert single_role.has_permission(user, "todos", "delete", todo) is False

    def test_conditional_without_data_denies(self, single_role):
        user = SingleRoleUser(role="user", user_id="u1")
        assert single_role.has_permission(user, "todos", "delete") is False

    def test_unconfigured_resource_denied(self, single_role):
        user = SingleRoleUser(role="user", user_id="u1")
        assert single_role.has_permission(user, "betaResource", "view") is False

    def test_beta_tester_views_beta_resource(self, single_role):
        tester = SingleRoleUser(role="betaTester", user_id="beta1")
        assert single_role.has_permission(tester, "betaResource", "view") is True

    @pytest.mark.parametrize("action", ["read", "write", "delete"])
    def test_unauthenticated_denied(self, single_role, action):
        assert single_role.has_permission(None, "todos", action) is False

    def test_empty_role_denied(self, single_role):
        assert single_role.has_permission({"role": ""}, "todos", "read") is False

    def test_missing_role_attribute_denied(self, single_role):
        assert single_role.has_permission(SimpleNamespace(user_id="x"), "todos", "read") is False

    def test_unknown_role_denied(self, single_role):
        assert single_role.has_permission({"role": "ghost"}, "todos", "read") is False

    def test_unknown_resource_and_action_denied(self, single_role):
        admin = SingleRoleUser(role="admin")
        assert single_role.has_permission(admin, "invoices", "read") is False
        assert single_role.has_permission(admin, "todos", "archive") is False

    def test_unhashable_role_denied(self, single_role):
        assert single_role.has_permission({"role": ["admin"]}, "todos", "read") is False

    def test_mapping_principal(self, single_role):
        assert single_role.has_permission({"role": "admin"}, "todos", "write") is True


# -- Multi-role mode ----------------------------------------------------------


class TestMultiRole:
    def test_any_role_grants(self, multi_role):
        user = MultiRoleUser(roles=["moderator", "admin"], user_id="m1")
        assert multi_role.has_permission(user, "todos", "write") is True

    def test_beta_plus_admin_views_beta(self, multi_role):
        user = MultiRoleUser(roles=["betaTester", "admin"], user_id="beta1")
        assert multi_role.has_permission(user, "betaResource", "view") is True

    def test_regular_user_cannot_view_beta(self, multi_role):
        user = MultiRoleUser(roles=["user"], user_id="u1")
        assert multi_role.has_permission(user, "betaResource", "view") is False

    def test_empty_roles_denied(self, multi_role):
        assert multi_role.has_permission(MultiRoleUser(roles=[]), "todos", "read") is False

    def test_missing_roles_denied(self, multi_role):
        assert multi_role.has_permission({"user_id": "u1"}, "todos", "read") is False

    def test_unauthenticated_denied(self, multi_role):
        assert multi_role.has_permission(None, "todos", "read") is False

    @pytest.mark.parametrize("roles", ["admin", b"admin"])
    def test_string_roles_denied(self, roles):
        baked = bake_authorization(
            "multiRole",
            {"a": {"doc": {"read": True}}, "admin": {"doc": {"read": False}}},
        )
        assert baked.has_permission({"roles": roles}, "doc", "read") is False

    def test_conditional_through_one_role(self, multi_role, todo):
        author = MultiRoleUser(roles=["moderator", "user"], user_id="u1")
        other = MultiRoleUser(roles=["moderator", "user"], user_id="u2")
        assert multi_role.has_permission(author, "todos", "delete", todo) is True
        assert multi_role.has_permission(other, "todos", "delete", todo) is False

    def test_role_order_does_not_matter(self, multi_role):
        a = MultiRoleUser(roles=["moderator", "admin"])
        b = MultiRoleUser(roles=["admin", "moderator"])
        assert multi_role.has_permission(a, "todos", "delete") is True
        assert multi_role.has_permission(b, "todos", "delete") is True

    def test_short_circuits_after_grant(self):
        calls = []

        def record(user, data):
            calls.append(user)
            return True

        baked = bake_authorization(
            "multiRole",
            {"a": {"doc": {"read": True}}, "b": {"doc": {"read": record}}},
        )
        assert baked.has_permission(MultiRoleUser(roles=["a", "b"]), "doc", "read") is True
        assert calls == []

    @pytest.mark.parametrize(
        "roles",
        [["admin"], ["moderator"], ["user"], ["betaTester"], ["admin", "user"], ["moderator", "betaTester"]],
    )
    def test_or_matches_single_role_evaluation(self, multi_role, single_role, roles, todo):
        for resource, action in [("todos", "read"), ("todos", "write"), ("todos", "delete"), ("betaResource", "view")]:
            expected = any(
                single_role.has_permission(SingleRoleUser(role=r, user_id="u1"), resource, action, todo)
                for r in roles
            )
            principal = MultiRoleUser(roles=roles, user_id="u1")
            assert multi_role.has_permission(principal, resource, action, todo) is expected


# -- Rule evaluation ----------------------------------------------------------


class TestEvaluateRule:
    def test_allowed_and_denied(self):
        assert evaluate_rule(ALLOWED, object()) is True
        assert evaluate_rule(DENIED, object()) is False

    @pytest.mark.parametrize("result", [None, 1, "yes", [True]])
    def test_non_boolean_predicate_result_denies(self, result):
        rule = Conditional(check=lambda user, data: result)
        assert evaluate_rule(rule, object()) is False

    def test_predicate_receives_principal_and_data(self):
        seen = {}

        def check(user, data):
            seen["args"] = (user, data)
            return True

        principal = SingleRoleUser(role="r")
        assert evaluate_rule(Conditional(check=check), principal, {"id": 1}) is True
        assert seen["args"] == (principal, {"id": 1})

    def test_predicate_exception_propagates(self):
        def boom(user, data):
            raise RuntimeError("predicate failed")

        baked = bake_authorization("singleRole", {"r": {"doc": {"edit": boom}}})
        with pytest.raises(RuntimeError, match="predicate failed"):
            baked.has_permission({"role": "r"}, "doc", "edit", {})


# -- Construction -------------------------------------------------------------


class TestBakeAuthorization:
    def test_returns_baked_authorization(self, single_role):
        assert isinstance(single_role, BakedAuthorization)
        assert single_role.mode is RoleMode.SINGLE_ROLE

    def test_accepts_enum_mode(self, todo_table):
        baked = bake_authorization(RoleMode.MULTI_ROLE, todo_table)
        assert baked.mode is RoleMode.MULTI_ROLE

    def test_rejects_unknown_mode(self, todo_table):
        with pytest.raises(ValueError):
            bake_authorization("superRole", todo_table)

    def test_table_is_copied_at_construction(self):
        config = {"admin": {"todos": {"read": False}}}
        baked = bake_authorization("singleRole", config)
        config["admin"]["todos"]["read"] = True
        config["admin"]["todos"]["write"] = True
        assert baked.has_permission({"role": "admin"}, "todos", "read") is False
        assert baked.has_permission({"role": "admin"}, "todos", "write") is False

    def test_concurrent_checks(self, multi_role, todo):
        principals = [MultiRoleUser(roles=["user"], user_id=f"u{i % 3}") for i in range(200)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(
                pool.map(lambda p: multi_role.has_permission(p, "todos", "delete", todo), principals)
            )
        assert results == [p.user_id == "u1" for p in principals]
