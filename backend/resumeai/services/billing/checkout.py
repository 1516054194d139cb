"""
Stripe-facing collaborators of the payment ledger.

``StripeCheckout`` opens hosted checkout sessions; ``StripeWebhookVerifier``
turns a signed webhook delivery into a ``PaymentEvent``. The ledger only ever
sees those two small shapes, so tests can swap in fakes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import stripe

from ...errors import AuthenticityError, CheckoutError


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str


@dataclass(frozen=True)
class PaymentEvent:
    event_type: str
    session_id: Optional[str] = None
    payment_id: Optional[str] = None
    customer_id: Optional[str] = None


class CheckoutInitiator(Protocol):
    def create_session(
        self,
        amount: int,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
        product_name: Optional[str] = None,
    ) -> CheckoutSession:
        ...


class StripeCheckout:
    """Checkout initiator backed by Stripe Checkout in ``payment`` mode."""

    def __init__(self, api_key: Optional[str], currency: str = "usd", product_name: str = "ResumeAI"):
        self.api_key = api_key
        self.currency = currency
        self.product_name = product_name

    def create_session(
        self,
        amount: int,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
        product_name: Optional[str] = None,
    ) -> CheckoutSession:
        if not self.api_key:
            raise CheckoutError("Stripe is not configured")
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                payment_method_types=["card"],
                customer_email=customer_email,
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "unit_amount": amount,
                            "product_data": {
                                "name": product_name or self.product_name,
                                "description": description,
                            },
                        },
                        "quantity": 1,
                    }
                ],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            raise CheckoutError(f"Checkout creation failed: {exc.user_message or exc}") from exc
        return CheckoutSession(session_id=session["id"], url=session["url"])


def _field(obj: Any, key: str) -> Optional[str]:
    # StripeObject supports subscripts and `in`, not dict methods
    value = obj[key] if key in obj else None
    # Expanded objects carry their own id
    if value is not None and not isinstance(value, str):
        value = value["id"] if "id" in value else None
    return str(value) if value else None


class StripeWebhookVerifier:
    """Payment notifier: verifies the Stripe signature and extracts the event."""

    def __init__(self, webhook_secret: Optional[str]):
        self.webhook_secret = webhook_secret

    def parse(self, payload: bytes, signature: Optional[str]) -> PaymentEvent:
        if not self.webhook_secret:
            raise AuthenticityError("Webhook secret is not configured")
        if not signature:
            raise AuthenticityError("Missing stripe-signature header")
        try:
            event = stripe.Webhook.construct_event(payload=payload, sig_header=signature, secret=self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise AuthenticityError(f"Webhook Error: {exc}") from exc

        obj = event["data"]["object"]
        event_type = event["type"]
        if _field(obj, "object") == "checkout.session":
            return PaymentEvent(
                event_type=event_type,
                session_id=_field(obj, "id"),
                payment_id=_field(obj, "payment_intent"),
                customer_id=_field(obj, "customer"),
            )
        # Charges and refunds reference the payment intent, not the session
        return PaymentEvent(
            event_type=event_type,
            payment_id=_field(obj, "payment_intent"),
            customer_id=_field(obj, "customer"),
        )
