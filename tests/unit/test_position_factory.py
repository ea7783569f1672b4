"""
Unit Tests for PositionFactory
"""

from datetime import date
from decimal import Decimal

import pytest

from app.domain.models import AssetClass, PositionRequest
from app.domain.services.position_factory import (
    PositionFactory,
    PositionValidationError,
    parse_positive_decimal,
    parse_purchase_date,
)
from app.domain.services.price_sources import (
    FixedMarkupPriceSource,
    LiveQuotePriceSource,
    PurchasePricePriceSource,
)
from conftest import make_rate


def _request(asset_class=AssetClass.CURRENCY, **overrides) -> PositionRequest:
    fields = dict(
        asset_class=asset_class,
        asset_name="Amerikan Doları",
        asset_code="USD",
        purchase_date="2024-03-01",
        quantity="100",
        unit_price="32.50",
    )
    fields.update(overrides)
    return PositionRequest(**fields)


@pytest.fixture
def factory():
    counter = iter(range(1, 1000))
    return PositionFactory(id_factory=lambda: f"pos-{next(counter)}")


class TestParsePositiveDecimal:

    @pytest.mark.parametrize("value, expected", [
        ("100", Decimal("100")),
        (" 32.50 ", Decimal("32.50")),
        (7, Decimal("7")),
        (0.5, Decimal("0.5")),
        (Decimal("1.25"), Decimal("1.25")),
    ])
    def test_accepts_text_and_numbers(self, value, expected):
        assert parse_positive_decimal(value, "quantity") == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "0", "-1", 0, -2.5, "abc", "NaN", "Infinity", True])
    def test_rejects_missing_and_non_positive(self, value):
        with pytest.raises(PositionValidationError) as exc_info:
            parse_positive_decimal(value, "quantity")
        assert exc_info.value.field == "quantity"

    @pytest.mark.parametrize("value", ["0.000000000001", "1.500000000000000000000", "9999999999999999", "1E+3"])
    def test_accepts_storable_precision(self, value):
        assert parse_positive_decimal(value, "quantity") == Decimal(value)

    @pytest.mark.parametrize("value", ["0.0000000000001", "10000000000000000", "1E+16"])
    def test_rejects_what_storage_cannot_hold(self, value):
        with pytest.raises(PositionValidationError) as exc_info:
            parse_positive_decimal(value, "unit_price")
        assert exc_info.value.field == "unit_price"


def test_parse_purchase_date_variants():
    assert parse_purchase_date("2024-03-01") == date(2024, 3, 1)
    assert parse_purchase_date(date(2024, 3, 1)) == date(2024, 3, 1)
    with pytest.raises(PositionValidationError):
        parse_purchase_date("01/03/2024")
    with pytest.raises(PositionValidationError):
        parse_purchase_date("")


class TestBuild:

    def test_currency_uses_live_sell_rate(self, factory):
        source = LiveQuotePriceSource([make_rate("USD", "32.50", "32.80")])

        position = factory.build(_request(), source)

        assert position.id == "pos-1"
        assert position.asset_code == "USD"
        assert position.purchase_date == date(2024, 3, 1)
        assert position.current_unit_price == Decimal("32.80")
        assert position.total_value == Decimal("3280.00")
        assert position.profit == Decimal("30.00")
        assert round(position.profit_percent, 3) == Decimal("0.923")
        assert position.price_simulated is False

    def test_currency_without_quote_starts_at_zero_profit(self, factory):
        source = LiveQuotePriceSource([make_rate("EUR", "35.00", "35.40")])

        position = factory.build(_request(), source)

        assert position.current_unit_price == position.purchase_unit_price
        assert position.profit == 0
        assert position.profit_percent == 0

    def test_zero_quote_is_treated_as_missing(self, factory):
        source = LiveQuotePriceSource([make_rate("USD", "0", "0")])

        position = factory.build(_request(), source)

        assert position.current_unit_price == Decimal("32.50")

    def test_metal_markup(self, factory):
        request = _request(
            AssetClass.METAL, asset_name="Altın", asset_code="xau",
            quantity="10", unit_price="2450.75",
        )

        position = factory.build(request, FixedMarkupPriceSource(Decimal("1.08")))

        assert position.asset_code == "XAU"
        assert position.current_unit_price == Decimal("2450.75") * Decimal("1.08")
        assert position.price_simulated is True

    def test_crypto_markup(self, factory):
        request = _request(
            AssetClass.CRYPTO, asset_name="Bitcoin", asset_code="BTC",
            quantity="0.015", unit_price="2150000",
        )

        position = factory.build(request, FixedMarkupPriceSource(Decimal("1.12")))

        assert position.current_unit_price == Decimal("2150000") * Decimal("1.12")
        assert position.profit_percent == Decimal("12.00")

    def test_purchase_price_source(self, factory):
        position = factory.build(_request(), PurchasePricePriceSource())

        assert position.profit == 0
        assert position.profit_percent == 0

    def test_ids_are_unique(self):
        factory = PositionFactory()
        ids = {factory.build(_request(), PurchasePricePriceSource()).id for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("asset_class", list(AssetClass))
    @pytest.mark.parametrize("field, value", [
        ("quantity", "0"),
        ("quantity", "-3"),
        ("unit_price", "0"),
        ("unit_price", -10),
    ])
    def test_rejects_non_positive_for_every_class(self, factory, asset_class, field, value):
        with pytest.raises(PositionValidationError) as exc_info:
            factory.build(_request(asset_class, **{field: value}), PurchasePricePriceSource())
        assert exc_info.value.field == field

    @pytest.mark.parametrize("field", ["asset_name", "asset_code", "purchase_date", "quantity", "unit_price"])
    def test_rejects_missing_fields(self, factory, field):
        with pytest.raises(PositionValidationError) as exc_info:
            factory.build(_request(**{field: None}), PurchasePricePriceSource())
        assert exc_info.value.field == field
