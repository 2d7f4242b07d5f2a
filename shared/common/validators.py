"""
Shared Validators Module.

Common validation utilities used across the ledger services.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.core.exceptions import ValidationError


# =============================================================================
# DATE/TIME VALIDATORS
# =============================================================================

def validate_date_range(
    start_date: date,
    end_date: date,
    max_days: Optional[int] = None,
    field_name: str = "date range"
) -> None:
    """Validate that a date range is valid."""
    if start_date > end_date:
        raise ValidationError(f"Start date must be before end date for {field_name}")

    if max_days is not None and (end_date - start_date).days > max_days:
        raise ValidationError(f"{field_name} cannot exceed {max_days} days")


# =============================================================================
# NUMERIC VALIDATORS
# =============================================================================

def validate_positive_decimal(
    value: Any,
    max_value: Optional[Decimal] = None,
    field_name: str = "value"
) -> Decimal:
    """Validate a non-negative decimal value."""
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise ValidationError(f"{field_name} must be a number")

    try:
        value = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")

    if not value.is_finite():
        raise ValidationError(f"{field_name} must be a number")

    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")

    return value


def validate_cycle_count(value: Any, field_name: str = "cycles") -> int:
    """Validate a non-negative whole cycle count."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")

    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative")

    return value


# =============================================================================
# FLIGHT-SPECIFIC VALIDATORS
# =============================================================================

def validate_flight_hours(
    value: Any,
    max_hours: Optional[Decimal] = None,
    field_name: str = "flight hours"
) -> Decimal:
    """Validate non-negative flight hours for a single flight, rounded to hundredths."""
    value = validate_positive_decimal(value, max_value=max_hours, field_name=field_name)
    return value.quantize(Decimal("0.01"))
