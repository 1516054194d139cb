from .checkout import CheckoutSession, PaymentEvent, StripeCheckout, StripeWebhookVerifier
from .ledger import EntitlementLedger
from .plans import DEFAULT_PLANS, Plan, PlanCatalog

__all__ = [
    "CheckoutSession",
    "DEFAULT_PLANS",
    "EntitlementLedger",
    "PaymentEvent",
    "Plan",
    "PlanCatalog",
    "StripeCheckout",
    "StripeWebhookVerifier",
]
