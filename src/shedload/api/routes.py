"""API routes for the courier portal."""

import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile

from shedload.schemas import (
    AdminAnalytics,
    AdminOrderPage,
    BookingRequest,
    Invoice,
    LoginRequest,
    Pricing,
    ServiceType,
    Shipment,
    SignupRequest,
    StatusUpdateRequest,
    TrackingReport,
    TrackingStage,
    User,
)
from shedload.services.invoices import list_invoices, project_invoice
from shedload.services.pricing import quote
from shedload.services.rest_client import ApiError
from shedload.state import AppState
from shedload.tracking.status import StageTransitionError

router = APIRouter()

QR_CODE_TYPES = {"image/png", "image/jpeg", "image/webp"}
QR_CODE_MAX_BYTES = 2 * 1024 * 1024

# API errors the caller can act on are passed through, the rest become 502
PASS_THROUGH_STATUSES = {400, 401, 403, 404, 409, 422}


def get_state(request: Request) -> AppState:
    return request.app.state.shedload


def require_user(state: AppState = Depends(get_state)) -> User:
    if not state.session.is_authenticated:
        raise HTTPException(status_code=401, detail="Please log in first.")
    return state.session.user


def require_admin(state: AppState = Depends(get_state)) -> User:
    if not state.session.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required.")
    return state.session.user


def api_failure(error: ApiError) -> HTTPException:
    """Translate an upstream API error for our caller."""
    status_code = error.status if error.status in PASS_THROUGH_STATUSES else 502
    return HTTPException(status_code=status_code, detail=error.message)


@router.get("/")
async def index(state: AppState = Depends(get_state)):
    """Portal status."""
    user = state.session.user
    return {
        "app": state.settings.app_name,
        "demo_mode": state.demo_mode,
        "authenticated": state.session.is_authenticated,
        "user": user.display_name if user else None,
        "shipments": len(state.shipments.shipments),
    }


@router.post("/auth/login")
async def login(body: LoginRequest, state: AppState = Depends(get_state)) -> User:
    """Log in. Demo mode accepts any email; production checks credentials with the API."""
    if state.demo_mode:
        user = User(
            id=uuid.uuid5(uuid.NAMESPACE_URL, f"mailto:{body.email.lower()}").hex,
            email=body.email,
            first_name=body.first_name,
            last_name=body.last_name,
            is_admin=body.email.lower() in {e.lower() for e in state.settings.demo_admin_emails},
        )
        await state.session.login(user)
        return user

    try:
        return await state.session.login_with_credentials(state.client, body.email, body.password)
    except ApiError as e:
        raise api_failure(e) from e


@router.post("/auth/signup", status_code=201)
async def signup(body: SignupRequest, state: AppState = Depends(get_state)):
    """Create an account."""
    if state.demo_mode:
        return await login(
            LoginRequest(email=body.email, first_name=body.first_name, last_name=body.last_name),
            state,
        )

    try:
        await state.session.signup(
            state.client, body.first_name, body.last_name, body.email, body.password
        )
    except ApiError as e:
        raise api_failure(e) from e
    return {"message": "Account created. Please log in."}


@router.post("/auth/logout", status_code=204)
async def logout(state: AppState = Depends(get_state)):
    await state.session.logout()
    return Response(status_code=204)


@router.get("/pricing/quote")
async def pricing_quote(
    weight_kg: float = Query(ge=0.1, le=100),
    service_type: ServiceType = ServiceType.STANDARD,
) -> Pricing:
    """Estimate the charge for a package."""
    return quote(weight_kg, service_type)


@router.get("/shipments")
async def my_shipments(
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
) -> list[Shipment]:
    """List the session's shipments, most recent first."""
    if not state.demo_mode:
        try:
            await state.shipments.refresh(state.client)
        except ApiError as e:
            raise api_failure(e) from e
    return state.shipments.shipments


@router.post("/shipments", status_code=201)
async def book_shipment(
    body: BookingRequest,
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
):
    """Book a new shipment."""
    try:
        shipment = await state.booking.book(body)
    except ApiError as e:
        raise api_failure(e) from e
    return {
        "message": f"Shipment booked successfully! Your Shipment ID is: {shipment.id}.",
        "shipment": shipment,
        "invoice_id": shipment.id,
    }


async def _find_shipment(state: AppState, shipment_id: str) -> Shipment:
    try:
        shipment = await state.tracker.get_shipment(shipment_id)
    except ApiError as e:
        raise api_failure(e) from e
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return shipment


@router.get("/shipments/{shipment_id}")
async def shipment_detail(
    shipment_id: str,
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
) -> Shipment:
    """Show a single shipment."""
    return await _find_shipment(state, shipment_id)


@router.get("/shipments/{shipment_id}/tracking")
async def track_shipment(
    shipment_id: str,
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
) -> TrackingReport:
    """Tracking history for a shipment."""
    try:
        report = await state.tracker.track(shipment_id)
    except ApiError as e:
        raise api_failure(e) from e
    if not report:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return report


@router.get("/invoices")
async def my_invoices(
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
) -> list[Invoice]:
    return list_invoices(state.shipments.shipments, state.company)


@router.get("/invoices/{invoice_id}")
async def invoice_detail(
    invoice_id: str,
    state: AppState = Depends(get_state),
    user: User = Depends(require_user),
) -> Invoice:
    """Invoice for a shipment (the invoice id is the shipment id)."""
    shipment = await _find_shipment(state, invoice_id)
    return project_invoice(shipment, state.company)


@router.get("/admin/orders")
async def admin_orders(
    page: int = Query(default=1, ge=1),
    q: str = "",
    status: TrackingStage | None = None,
    state: AppState = Depends(get_state),
    admin: User = Depends(require_admin),
) -> AdminOrderPage:
    """One page of all orders."""
    try:
        return await state.admin.fetch(page, q, status)
    except ApiError as e:
        raise api_failure(e) from e


@router.put("/admin/orders/{shipment_id}/status")
async def admin_update_status(
    shipment_id: str,
    body: StatusUpdateRequest,
    state: AppState = Depends(get_state),
    admin: User = Depends(require_admin),
) -> AdminOrderPage:
    """Move an order to a new stage."""
    try:
        return await state.admin.update_status(shipment_id, body.status)
    except StageTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ApiError as e:
        raise api_failure(e) from e


@router.get("/admin/analytics")
async def admin_analytics(
    state: AppState = Depends(get_state),
    admin: User = Depends(require_admin),
) -> AdminAnalytics:
    """Order, revenue and user totals for the dashboard."""
    try:
        return await state.admin.fetch_analytics()
    except ApiError as e:
        raise api_failure(e) from e


@router.get("/admin/qr-code")
async def admin_qr_code(state: AppState = Depends(get_state)):
    """Current payment QR code image."""
    try:
        qr_code = await state.admin.fetch_qr_code()
    except ApiError as e:
        raise api_failure(e) from e
    if not qr_code:
        raise HTTPException(status_code=404, detail="No QR code uploaded")
    content, content_type = qr_code
    return Response(content=content, media_type=content_type)


@router.post("/admin/qr-code", status_code=201)
async def admin_upload_qr_code(
    qr_code: UploadFile = File(...),
    state: AppState = Depends(get_state),
    admin: User = Depends(require_admin),
):
    """Replace the payment QR code image."""
    if qr_code.content_type not in QR_CODE_TYPES:
        raise HTTPException(status_code=400, detail="Please select a PNG, JPG, or WEBP image.")

    content = await qr_code.read()
    if len(content) > QR_CODE_MAX_BYTES:
        raise HTTPException(status_code=413, detail="Please select an image smaller than 2MB.")

    try:
        await state.admin.upload_qr_code(content, qr_code.filename or "qr_code", qr_code.content_type)
    except ApiError as e:
        raise api_failure(e) from e
    return {"message": "QR code updated."}
