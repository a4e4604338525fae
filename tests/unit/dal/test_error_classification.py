"""Unit tests for catalog query error classification."""

import pytest

from dal.error_classification import classify_error


class _InsufficientPrivilegeError(Exception):
    __module__ = "asyncpg.exceptions"


class _UndefinedTableError(Exception):
    __module__ = "asyncpg.exceptions"


@pytest.mark.parametrize(
    "exc, expected",
    [
        (TimeoutError(), "timeout"),
        (Exception("canceling statement due to statement timeout"), "timeout"),
        (ConnectionRefusedError("[Errno 111] Connection refused"), "connectivity"),
        (OSError("could not connect to server"), "connectivity"),
        (Exception('password authentication failed for user "sync"'), "auth"),
        (Exception("permission denied for schema information_schema"), "auth"),
        (Exception('syntax error at or near "FROM"'), "syntax"),
        (Exception("something odd"), "unknown"),
    ],
)
def test_classify_by_message_and_type(exc, expected) -> None:
    assert classify_error("postgres", exc) == expected


def test_classify_asyncpg_privilege_class() -> None:
    """Classify asyncpg permission exceptions by class name."""
    assert classify_error("postgres", _InsufficientPrivilegeError("nope")) == "auth"


def test_classify_asyncpg_undefined_class() -> None:
    assert classify_error("postgres", _UndefinedTableError("x")) == "syntax"


def test_class_name_rules_apply_only_to_postgres() -> None:
    assert classify_error("other", _InsufficientPrivilegeError("nope")) == "unknown"
