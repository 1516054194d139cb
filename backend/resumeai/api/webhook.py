import asyncio

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..errors import ConflictError
from ..services.billing import EntitlementLedger, StripeWebhookVerifier
from ..utils.logger import get_logger
from .deps import get_db, get_ledger, get_webhook_verifier

router = APIRouter()
logger = get_logger("resumeai.api.webhook")

@router.post("/webhook")
async def stripe_webhook_endpoint(
    request: Request,
    db: Session = Depends(get_db),
    ledger: EntitlementLedger = Depends(get_ledger),
    verifier: StripeWebhookVerifier = Depends(get_webhook_verifier),
):
    """
    Stripe webhook. Signature failures are rejected with 400 (AuthenticityError);
    every verified event is acknowledged, even when it matches no payment,
    so Stripe stops retrying events that can never apply.
    """
    payload = await request.body()
    event = verifier.parse(payload, request.headers.get("stripe-signature"))

    try:
        outcome = await asyncio.to_thread(ledger.reconcile, db, event)
    except ConflictError as exc:
        logger.warning(f"Webhook {event.event_type} not applied: {exc.message}")
        outcome = "rejected"

    return {"received": True, "outcome": outcome}
