"""Invoice projection.

Invoices are never stored. Each one is reshaped from a shipment's stored
pricing on demand, so the shipment stays the single source of truth for
money.
"""

from pathlib import Path

import yaml

from shedload.schemas import (
    CompanyProfile,
    Invoice,
    InvoiceItem,
    PaymentStatus,
    Shipment,
)
from shedload.services.pricing import TAX_RATE


def load_company(yaml_path: Path) -> CompanyProfile:
    """Load the billing company record from a YAML file."""
    with open(yaml_path) as f:
        data = yaml.safe_load(f)

    return CompanyProfile(
        legal_name=data["legal_name"],
        address=data["address"],
        email=data["email"],
        phone=data["phone"],
        gstin=data["gstin"],
        pan=data["pan"],
    )


def project_invoice(shipment: Shipment, company: CompanyProfile) -> Invoice:
    """Build the display invoice for a shipment."""
    pricing = shipment.pricing
    weight = f"{shipment.package.weight_kg:g}"

    item = InvoiceItem(
        description=f"{shipment.service_type.value} Shipping for package {shipment.id} ({weight}kg)",
        quantity=1,
        unit_price=pricing.price_without_tax,
        total=pricing.price_without_tax,
    )

    return Invoice(
        id=shipment.id,
        invoice_date=shipment.booking_date,
        due_date=shipment.booking_date,
        billed_from=company,
        billed_to=shipment.sender.model_copy(deep=True),
        receiver=shipment.receiver.model_copy(deep=True),
        items=[item],
        subtotal=pricing.price_without_tax,
        tax_rate=TAX_RATE,
        tax_amount=pricing.tax_amount,
        grand_total=pricing.total_with_tax,
        # Payment is taken before a booking is confirmed
        status=PaymentStatus.PAID,
        service_type=shipment.service_type,
        package_weight_kg=shipment.package.weight_kg,
    )


def list_invoices(shipments: list[Shipment], company: CompanyProfile) -> list[Invoice]:
    """Project every shipment, keeping the list order."""
    return [project_invoice(shipment, company) for shipment in shipments]
