"""
Charge type registry: built-in and user-created charge categories.
"""
import logging
from typing import Iterable, List
from app.core.exceptions import ValidationError
from app.services.ledger_entries import ChargeTypeRecord

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return " ".join(name.split()).casefold()


class ChargeTypeRegistry:
    """
    Lookup and creation of charge types through a ledger gateway.

    Duplicate names are advisory: creating a name that already exists
    (ignoring case and extra whitespace) logs a warning and returns the
    existing type instead of inserting another row.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    def list(self) -> List[ChargeTypeRecord]:
        """Built-in types first, then custom; each group by name."""
        return sorted(self.gateway.list_charge_types(), key=lambda ct: (ct.is_custom, ct.name.casefold()))

    def find_by_name(self, name: str):
        wanted = _normalize(name)
        for charge_type in self.gateway.list_charge_types():
            if _normalize(charge_type.name) == wanted:
                return charge_type
        return None

    def create(self, name: str, is_custom: bool = True) -> ChargeTypeRecord:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name", "charge type name is required")
        name = " ".join(name.split())

        existing = self.find_by_name(name)
        if existing is not None:
            logger.warning(f"Charge type '{name}' already exists (id={existing.id}); reusing it")
            return existing

        charge_type = self.gateway.create_charge_type(name, bool(is_custom))
        logger.info(f"Created {'custom' if charge_type.is_custom else 'built-in'} charge type '{name}'")
        return charge_type


def seed_builtin_charge_types(gateway, names: Iterable[str]) -> List[ChargeTypeRecord]:
    """Insert missing built-in charge types; returns the ones created."""
    registry = ChargeTypeRegistry(gateway)
    created = []
    for name in names:
        if registry.find_by_name(name) is None:
            created.append(registry.create(name, is_custom=False))
    return created
