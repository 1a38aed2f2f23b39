"""Shared test fixtures for RoleBaker."""

import logging

import pytest

from rolebaker.engine import bake_multi_role, bake_single_role


def _author_only(user, todo):
    return todo is not None and todo.get("authorId") == user.user_id


def _todo_table(delete_rule):
    return {
        "admin": {"todos": {"read": True, "write": True, "delete": True}},
        "moderator": {"todos": {"read": True, "write": False, "delete": False}},
        "user": {"todos": {"read": True, "write": False, "delete": delete_rule}},
        "betaTester": {"betaResource": {"view": True}},
    }


@pytest.fixture
def action_docs():
    return {
        "todos": {
            "read": "Read to-dos",
            "write": "Write to-dos",
            "delete": "Delete to-dos",
        },
        "betaResource": {"view": "View beta resource"},
    }


@pytest.fixture
def resources():
    return {"todos": ["read", "write", "delete"], "betaResource": ["view"]}


@pytest.fixture
def todo_table():
    return _todo_table(
        {"check": _author_only, "description": "Only the author can delete their own to-dos"}
    )


@pytest.fixture
def single_role(todo_table, action_docs):
    return bake_single_role(todo_table, action_docs)


@pytest.fixture
def single_role_without_docs():
    return bake_single_role(_todo_table({"check": _author_only}))


@pytest.fixture
def multi_role(todo_table, action_docs):
    return bake_multi_role(todo_table, action_docs)


@pytest.fixture
def todo():
    return {"authorId": "u1", "title": "title", "description": "description"}


@pytest.fixture(autouse=True)
def _reset_rolebaker_logger():
    """CLI tests attach handlers bound to CliRunner streams; drop them after each test."""
    yield
    logger = logging.getLogger("rolebaker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("ROLEBAKER_CONFIG", raising=False)
