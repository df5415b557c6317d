"""
Typed exceptions for the trip ledger.

Every error carries a machine-readable ``code`` so API handlers and callers
can branch on the type instead of parsing messages.

    LedgerError
    +-- ValidationError     VALIDATION_ERROR  bad field on a ledger value
    +-- PodRequiredError    POD_REQUIRED      supplier balance payment before POD
    +-- NotFoundError       NOT_FOUND         trip, charge type or entry missing
    +-- StoreError          STORE_ERROR       record store / transport failure
"""
from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_details(self) -> Dict[str, Any]:
        """Structured payload for API error responses."""
        return {"code": self.code}


class ValidationError(LedgerError):
    """A ledger value was built with an out-of-domain field."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid {field}: {message}")

    def to_details(self) -> Dict[str, Any]:
        return {"code": self.code, "field": self.field}


class PodRequiredError(LedgerError):
    """Supplier balance payment attempted while POD is not uploaded."""

    code = "POD_REQUIRED"

    def __init__(self, trip_id: Any):
        self.trip_id = trip_id
        super().__init__(
            "POD must be uploaded before adding balance payments for the supplier"
        )

    def to_details(self) -> Dict[str, Any]:
        return {"code": self.code, "trip_id": self.trip_id}


class NotFoundError(LedgerError):
    """A referenced record does not exist in the store."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

    def to_details(self) -> Dict[str, Any]:
        return {"code": self.code, "entity": self.entity, "id": self.entity_id}


class StoreError(LedgerError):
    """Failure reported by the record store or its transport."""

    code = "STORE_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    def to_details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"code": self.code}
        if self.status_code is not None:
            details["status_code"] = self.status_code
        return details
