"""Domain records shared by the stores, services and routes."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field


class ServiceType(str, Enum):
    """Service tier chosen at booking."""

    STANDARD = "Standard"
    EXPRESS = "Express"


class TrackingStage(str, Enum):
    """Where a shipment is in its lifecycle."""

    BOOKED = "Booked"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"  # Terminal
    CANCELLED = "Cancelled"  # Terminal, reachable from any non-terminal stage


class StepStatus(str, Enum):
    """Display tag for a tracking step."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


class PaymentStatus(str, Enum):
    """Invoice payment state."""

    PAID = "Paid"
    PENDING = "Pending"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class User(BaseModel):
    """The logged-in user."""

    id: str
    email: EmailStr
    first_name: str | None = None
    last_name: str | None = None
    is_admin: bool = False

    @property
    def display_name(self) -> str:
        names = [n for n in (self.first_name, self.last_name) if n]
        return " ".join(names) if names else self.email


class Address(BaseModel):
    """A postal address."""

    street: str
    city: str
    state: str
    pincode: str
    country: str


class Party(BaseModel):
    """A sender or receiver."""

    name: str
    address: Address
    phone: str


class PackageDetails(BaseModel):
    """Weight and dimensions of a package."""

    weight_kg: float = Field(gt=0)
    width_cm: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    length_cm: float = Field(gt=0)


class Pricing(BaseModel):
    """Charges for a shipment, computed once at booking."""

    price_without_tax: Decimal
    tax_amount: Decimal
    total_with_tax: Decimal


class TrackingStep(BaseModel):
    """One entry in a shipment's tracking history."""

    stage: TrackingStage
    date: UtcDateTime
    location: str
    activity: str
    status: StepStatus | None = None


class Shipment(BaseModel):
    """A courier booking."""

    id: str
    sender: Party
    receiver: Party
    package: PackageDetails
    pickup_date: UtcDateTime
    service_type: ServiceType
    booking_date: UtcDateTime
    pricing: Pricing
    status: TrackingStage = TrackingStage.BOOKED
    tracking_history: list[TrackingStep] = Field(default_factory=list)
    last_updated_at: UtcDateTime | None = None


class CompanyProfile(BaseModel):
    """The billing company printed on every invoice."""

    legal_name: str
    address: str
    email: str
    phone: str
    gstin: str
    pan: str


class InvoiceItem(BaseModel):
    """A single invoice line."""

    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


class Invoice(BaseModel):
    """Display projection of a shipment's charges. Never stored."""

    id: str
    invoice_date: UtcDateTime
    due_date: UtcDateTime
    billed_from: CompanyProfile
    billed_to: Party
    receiver: Party
    items: list[InvoiceItem]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    status: PaymentStatus
    service_type: ServiceType
    package_weight_kg: float


class TrackingReport(BaseModel):
    """Tracking history for display."""

    shipment_id: str
    status: TrackingStage
    history: list[TrackingStep]
    source: str


class AdminOrderPage(BaseModel):
    """One page of orders as shown on the admin board."""

    shipments: list[Shipment]
    total_pages: int
    current_page: int
    total_count: int


class AdminAnalytics(BaseModel):
    """Site-wide totals for the admin dashboard. Missing figures are None."""

    total_orders: int | None = None
    total_revenue: Decimal | None = None
    avg_revenue: Decimal | None = None
    total_users: int | None = None


# Request bodies

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"


class AddressInput(Address):
    street: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2)
    pincode: str = Field(pattern=r"^\d{5,6}$")
    country: str = Field(default="India", min_length=2)


class PartyInput(Party):
    name: str = Field(min_length=2)
    address: AddressInput
    phone: str = Field(pattern=PHONE_PATTERN)


class BookingRequest(BaseModel):
    """A new shipment as entered by the customer."""

    sender: PartyInput
    receiver: PartyInput
    weight_kg: float = Field(ge=0.1)
    width_cm: float = Field(default=10, ge=1)
    height_cm: float = Field(default=10, ge=1)
    length_cm: float = Field(default=10, ge=1)
    pickup_date: date
    service_type: ServiceType = ServiceType.STANDARD


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(default="", max_length=128)
    first_name: str | None = None
    last_name: str | None = None


class SignupRequest(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class StatusUpdateRequest(BaseModel):
    status: TrackingStage
