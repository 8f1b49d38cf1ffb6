"""Shipment charges."""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from shedload.schemas import Pricing, ServiceType

BASE_CHARGE = Decimal("20")  # Rs. 20 per shipment
RATE_PER_HALF_KG = Decimal("45")  # Rs. 45 per started 0.5 kg
EXPRESS_FEE = Decimal("50")
TAX_RATE = Decimal("0.18")

HALF_KG = Decimal("0.5")
CENTS = Decimal("0.01")


def half_kg_units(weight_kg: float) -> int:
    """Number of started half-kilogram units (0.6 kg counts as 2)."""
    return int((Decimal(str(weight_kg)) / HALF_KG).to_integral_value(rounding=ROUND_CEILING))


def tax_for(amount: Decimal) -> Decimal:
    """18% tax on a net amount, rounded half-up to paise."""
    return (amount * TAX_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)


def quote(weight_kg: float, service_type: ServiceType) -> Pricing:
    """Price a package.

    The net charge is the base charge plus the per-half-kg rate, plus the
    express fee for Express service. Tax is 18% of the net charge.
    """
    if weight_kg <= 0:
        raise ValueError("weight_kg must be positive")

    net = BASE_CHARGE + half_kg_units(weight_kg) * RATE_PER_HALF_KG
    if service_type == ServiceType.EXPRESS:
        net += EXPRESS_FEE
    net = net.quantize(CENTS)

    tax = tax_for(net)
    return Pricing(price_without_tax=net, tax_amount=tax, total_with_tax=net + tax)
