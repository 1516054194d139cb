from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ... import models, schemas
from ..deps import get_db, get_current_user, get_ledger
from ...services.billing import EntitlementLedger

router = APIRouter()

@router.post("/create-checkout", response_model=schemas.payment.CheckoutResponse)
def create_checkout_endpoint(
    request: schemas.payment.CheckoutRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
    ledger: EntitlementLedger = Depends(get_ledger),
):
    """
    Start a checkout for one of the fixed plans and return the hosted page URL.
    """
    payment, session = ledger.create_intent(
        db,
        current_user,
        request.plan,
        client_ip=http_request.client.host if http_request.client else None,
        user_agent=http_request.headers.get("user-agent"),
    )
    return {"sessionId": session.session_id, "url": session.url, "paymentId": payment.id}


@router.get("/status/{payment_id}", response_model=schemas.payment.Payment)
def get_payment_status_endpoint(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
    ledger: EntitlementLedger = Depends(get_ledger),
):
    return ledger.get_status(db, payment_id, current_user.id)
