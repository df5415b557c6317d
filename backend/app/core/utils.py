"""
Utility functions for the application.
"""
from typing import Any, Dict
from decimal import Decimal, InvalidOperation


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response


def parse_decimal(value: Any) -> Decimal:
    """
    Convert a number-like value to Decimal without going through binary floats.
    Raises ValueError for bools and anything that is not a number.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"{value!r} is not a number")
    raise ValueError(f"{type(value).__name__} is not a number")
