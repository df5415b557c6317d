"""
Tests for the charge type registry.
"""
import logging
import pytest
from app.core.exceptions import ValidationError
from app.services.charge_type_service import ChargeTypeRegistry, seed_builtin_charge_types


def test_create_and_list_groups_builtin_first(gateway):
    registry = ChargeTypeRegistry(gateway)
    registry.create("Weighbridge")
    registry.create("Toll", is_custom=False)
    registry.create("advance fuel")

    names = [(ct.name, ct.is_custom) for ct in registry.list()]
    assert names == [("Toll", False), ("advance fuel", True), ("Weighbridge", True)]


def test_duplicate_name_returns_existing(gateway, caplog):
    registry = ChargeTypeRegistry(gateway)
    first = registry.create("Late Delivery")
    with caplog.at_level(logging.WARNING):
        second = registry.create("  late   delivery ")
    assert second == first
    assert len(registry.list()) == 1
    assert "already exists" in caplog.text


@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_name_rejected(gateway, name):
    with pytest.raises(ValidationError) as exc:
        ChargeTypeRegistry(gateway).create(name)
    assert exc.value.field == "name"


def test_seed_builtin_is_repeatable(gateway):
    created = seed_builtin_charge_types(gateway, ["Detention", "Toll"])
    assert [ct.name for ct in created] == ["Detention", "Toll"]
    assert all(not ct.is_custom for ct in created)
    assert seed_builtin_charge_types(gateway, ["Detention", "Toll", "Damage"])[0].name == "Damage"
    assert len(gateway.list_charge_types()) == 3
