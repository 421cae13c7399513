import pytest

from services.access_policy import (
    OPERATION_POLICY,
    Principal,
    Role,
    check_access,
    personnel_role_lookup,
    required_roles_for,
)
from utils.errors import RoleNotFound


def _fixed(role):
    return lambda principal: role


def _missing(principal):
    raise RoleNotFound()


def test_empty_requirement_allows_without_lookup():
    calls = []

    def lookup(principal):
        calls.append(principal)
        return "staff"

    decision = check_access(Principal(email="a@example.com"), set(), lookup)

    assert decision.allowed
    assert calls == []


@pytest.mark.parametrize("role", ["admin", "manager"])
def test_required_role_is_allowed(role):
    decision = check_access(Principal(email="a@example.com"), {Role.ADMIN, Role.MANAGER}, _fixed(role))

    assert decision.allowed
    assert decision.reason is None


def test_other_role_is_denied_with_insufficient_permissions():
    decision = check_access(Principal(email="a@example.com"), {Role.ADMIN}, _fixed("staff"))

    assert not decision.allowed
    assert decision.reason == "insufficient permissions"


def test_unknown_principal_is_denied_as_unverifiable():
    decision = check_access(Principal(email="ghost@example.com"), {Role.MANAGER}, _missing)

    assert not decision.allowed
    assert decision.reason == "role unverifiable"


def test_stock_movement_is_restricted_to_admin_and_manager():
    assert required_roles_for("reports.stock_movement") == {Role.ADMIN, Role.MANAGER}
    assert required_roles_for("reports.stock_summary") == set()
    assert required_roles_for("logs.read") == {Role.ADMIN}


def test_undeclared_operation_is_a_programming_error():
    with pytest.raises(KeyError):
        required_roles_for("orders.teleport")


def test_every_policy_entry_uses_known_roles():
    for roles in OPERATION_POLICY.values():
        assert all(isinstance(r, Role) for r in roles)


def test_personnel_lookup_reads_role_by_email(db_session, make_personnel):
    make_personnel(role="manager", email="boss@example.com")
    lookup = personnel_role_lookup(db_session)

    assert lookup(Principal(email="Boss@Example.com ")) == "manager"
    with pytest.raises(RoleNotFound):
        lookup(Principal(email="nobody@example.com"))
