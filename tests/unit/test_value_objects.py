"""Unit tests for permission identifiers and scope matching."""

import pytest

from portalauthz.domain.value_objects import (
    PermissionId,
    is_valid_permission_id,
    normalize_scope,
    permission_grants,
    scope_matches,
)


@pytest.mark.parametrize(
    "value",
    ["grades:edit", "grades:view", "course_sections:read", "grades:*", "*", "*:*"],
)
def test_valid_permission_ids(value: str) -> None:
    assert is_valid_permission_id(value)
    assert PermissionId(value).value == value


@pytest.mark.parametrize(
    "value",
    ["", "grades", "Grades:edit", "grades:", ":edit", "grades:edit:extra", "*:edit", "gr ades:x"],
)
def test_invalid_permission_ids(value: str) -> None:
    assert not is_valid_permission_id(value)
    with pytest.raises(ValueError, match="Invalid permission identifier"):
        PermissionId(value)


def test_exact_permission_grants_only_itself() -> None:
    assert permission_grants("grades:edit", "grades:edit")
    assert not permission_grants("grades:edit", "grades:view")


def test_resource_wildcard_grants_every_action_of_resource() -> None:
    assert permission_grants("grades:*", "grades:edit")
    assert permission_grants("grades:*", "grades:approve")
    assert not permission_grants("grades:*", "payments:read")


@pytest.mark.parametrize("wildcard", ["*", "*:*"])
def test_global_wildcard_grants_everything(wildcard: str) -> None:
    assert permission_grants(wildcard, "payments:approve")
    assert PermissionId(wildcard).is_wildcard


def test_malformed_granted_id_grants_nothing() -> None:
    assert not permission_grants("not a permission", "grades:edit")


def test_permission_resource() -> None:
    assert PermissionId("grades:edit").resource == "grades"
    assert not PermissionId("grades:edit").is_wildcard


def test_unscoped_assignment_matches_any_context() -> None:
    assert scope_matches(None, {"department": "physics"})
    assert scope_matches({}, {"department": "physics"})


def test_scoped_assignment_matches_without_context() -> None:
    assert scope_matches({"department": "physics"}, None)


def test_scope_requires_exact_match_on_shared_keys() -> None:
    scope = {"department": "physics", "course": "PHY101"}
    assert scope_matches(scope, {"department": "physics"})
    assert not scope_matches(scope, {"department": "chemistry"})
    assert not scope_matches(scope, {"department": "Physics"})
    assert scope_matches(scope, {"faculty": "science"})


def test_normalize_scope() -> None:
    assert normalize_scope(None) is None
    assert normalize_scope({}) is None
    assert normalize_scope({" department ": " physics ", "course": ""}) == {
        "department": "physics"
    }
    assert normalize_scope({"course": None}) is None
