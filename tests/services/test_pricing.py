"""Tests for shipment pricing."""

from decimal import Decimal

import pytest

from shedload.schemas import ServiceType
from shedload.services.pricing import half_kg_units, quote


class TestQuote:
    """Test charges for booked packages."""

    def test_standard_shipment(self):
        """0.6kg counts as two half-kg units: 20 + 2 x 45."""
        pricing = quote(0.6, ServiceType.STANDARD)

        assert pricing.price_without_tax == Decimal("110.00")
        assert pricing.tax_amount == Decimal("19.80")
        assert pricing.total_with_tax == Decimal("129.80")

    def test_express_shipment(self):
        """Express adds a flat fee: 20 + 45 + 50."""
        pricing = quote(0.4, ServiceType.EXPRESS)

        assert pricing.price_without_tax == Decimal("115.00")
        assert pricing.tax_amount == Decimal("20.70")
        assert pricing.total_with_tax == Decimal("135.70")

    def test_total_is_net_plus_tax(self):
        for weight in (0.1, 0.5, 0.75, 3.3, 12.0, 99.9):
            for service in ServiceType:
                pricing = quote(weight, service)
                assert pricing.total_with_tax == pricing.price_without_tax + pricing.tax_amount

    def test_rejects_non_positive_weight(self):
        with pytest.raises(ValueError):
            quote(0, ServiceType.STANDARD)


class TestHalfKgUnits:
    """Test weight rounding."""

    @pytest.mark.parametrize(
        "weight, units",
        [(0.1, 1), (0.5, 1), (0.51, 2), (1.0, 2), (2.2, 5)],
    )
    def test_rounds_up_to_started_half_kg(self, weight, units):
        assert half_kg_units(weight) == units
