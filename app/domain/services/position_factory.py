"""
POSITION FACTORY
Validate raw "add investment" input and construct a Position

RULES:
- Every required field must be present and non-blank
- Quantity and unit price must parse to positive finite numbers
- Numbers must fit the stored precision (MAX_DECIMAL_PLACES, MAX_INTEGER_DIGITS)
- Nothing is constructed unless every check passes
- No I/O
"""

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from app.domain.models import NumericInput, Position, PositionRequest
from app.domain.services.price_sources import PriceSource

# Stored columns hold 20 integer digits and 18 decimal places; inputs keep
# headroom for a markup factor of up to 2 integer and 6 decimal digits.
MAX_DECIMAL_PLACES = 12
MAX_INTEGER_DIGITS = 16


class PositionValidationError(ValueError):
    """Raised when input cannot become a Position"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def new_position_id() -> str:
    return uuid.uuid4().hex


def _decimal_places(number: Decimal) -> int:
    """Significant digits after the point, ignoring trailing zeros"""
    _, digits, exponent = number.as_tuple()
    while exponent < 0 and len(digits) > 1 and digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    return max(0, -exponent)


def parse_positive_decimal(value: NumericInput, field: str) -> Decimal:
    """
    Parse text or a number into a positive Decimal.

    Raises:
        PositionValidationError: If the value is missing, not a number,
            not finite, not greater than zero, or too precise to store
    """
    if value is None or isinstance(value, bool):
        raise PositionValidationError(field, "is required")

    text = str(value).strip()
    if not text:
        raise PositionValidationError(field, "is required")

    try:
        number = Decimal(text)
    except InvalidOperation:
        raise PositionValidationError(field, f"'{text}' is not a number")

    if not number.is_finite():
        raise PositionValidationError(field, "must be a finite number")
    if number <= Decimal("0"):
        raise PositionValidationError(field, "must be greater than zero")

    if _decimal_places(number) > MAX_DECIMAL_PLACES:
        raise PositionValidationError(
            field, f"has more than {MAX_DECIMAL_PLACES} decimal places"
        )
    if number.adjusted() + 1 > MAX_INTEGER_DIGITS:
        raise PositionValidationError(
            field, f"has more than {MAX_INTEGER_DIGITS} integer digits"
        )
    return number


def parse_purchase_date(value, field: str = "purchase_date") -> date:
    if value is None:
        raise PositionValidationError(field, "is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        raise PositionValidationError(field, "is required")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise PositionValidationError(field, f"'{text}' is not a YYYY-MM-DD date")


def _required_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise PositionValidationError(field, "is required")
    return text


class PositionFactory:
    """
    Builds positions from requests, or refuses.
    """

    def __init__(self, id_factory: Callable[[], str] = new_position_id):
        self._id_factory = id_factory

    def build(self, request: PositionRequest, price_source: PriceSource) -> Position:
        """
        Construct a Position valued by the given price source.

        When the price source has no price for the asset, the current price
        falls back to the purchase price so profit starts at exactly zero.

        Raises:
            PositionValidationError: On any missing or non-positive field
        """
        asset_name = _required_text(request.asset_name, "asset_name")
        asset_code = _required_text(request.asset_code, "asset_code").upper()
        purchase_date = parse_purchase_date(request.purchase_date)
        quantity = parse_positive_decimal(request.quantity, "quantity")
        unit_price = parse_positive_decimal(request.unit_price, "unit_price")

        current_price = price_source.current_price(asset_code, unit_price)
        simulated = price_source.simulated
        if current_price is None or current_price <= Decimal("0"):
            current_price = unit_price
            simulated = False

        return Position(
            id=self._id_factory(),
            asset_class=request.asset_class,
            asset_name=asset_name,
            asset_code=asset_code,
            purchase_date=purchase_date,
            purchase_quantity=quantity,
            purchase_unit_price=unit_price,
            current_unit_price=current_price,
            price_simulated=simulated,
        )
