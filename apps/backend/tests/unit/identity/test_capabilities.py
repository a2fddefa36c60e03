"""
Name: Role Capability Table Unit Tests

Responsibilities:
  - Pin the role -> capability table
  - Verify developer-only capabilities stay out of admin
"""

import pytest
from tienda.identity.capabilities import (
    Capability,
    capabilities_for,
    has_capability,
)
from tienda.identity.users import UserRole

pytestmark = pytest.mark.unit


def test_customer_only_owns_orders():
    assert capabilities_for(UserRole.USER) == frozenset({Capability.ORDERS_OWN})


@pytest.mark.parametrize(
    "capability",
    [
        Capability.CATALOG_MANAGE,
        Capability.USERS_READ,
        Capability.USERS_ASSIGN_ROLE,
        Capability.USERS_RESET_PASSWORD,
        Capability.LEDGER_READ,
        Capability.LEDGER_MANAGE,
        Capability.ORDERS_MANAGE,
    ],
)
def test_staff_capabilities_shared_by_admin_and_developer(capability):
    assert has_capability(UserRole.ADMIN, capability)
    assert has_capability(UserRole.DEVELOPER, capability)
    assert not has_capability(UserRole.USER, capability)


@pytest.mark.parametrize(
    "capability", [Capability.USERS_GRANT_DEVELOPER, Capability.SETTINGS_MANAGE]
)
def test_developer_only_capabilities(capability):
    assert has_capability(UserRole.DEVELOPER, capability)
    assert not has_capability(UserRole.ADMIN, capability)


def test_missing_role_has_nothing():
    assert not has_capability(None, Capability.ORDERS_OWN)
