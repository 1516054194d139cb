"""
Payment intent lifecycle and the entitlement it grants.

    pending -> completed -> refunded
    pending -> failed

Every transition is a conditional UPDATE guarded by the current status, so a
webhook delivered twice (or twice at once) moves the row only once. Granting
the plan is a second guarded step keyed on ``entitlement_granted``: if the
process dies after the status commit, replaying the event applies only the
grant.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError
from ...models.payment import Payment, PENDING, COMPLETED, FAILED, REFUNDED
from ...models.user import User
from ...utils.logger import get_logger
from .checkout import CheckoutInitiator, CheckoutSession, PaymentEvent
from .plans import EXPIRING_PLAN, PlanCatalog

logger = get_logger("resumeai.ledger")

# reconcile() outcomes besides the target statuses
DUPLICATE = "duplicate"
UNKNOWN = "unknown"
IGNORED = "ignored"

EVENT_TRANSITIONS: Dict[str, Tuple[str, str]] = {
    "checkout.session.completed": (PENDING, COMPLETED),
    "checkout.session.async_payment_succeeded": (PENDING, COMPLETED),
    "checkout.session.expired": (PENDING, FAILED),
    "checkout.session.async_payment_failed": (PENDING, FAILED),
    "charge.refunded": (COMPLETED, REFUNDED),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _one_year_after(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # Feb 29 -> Feb 28
        return moment.replace(year=moment.year + 1, day=28)


class EntitlementLedger:
    def __init__(
        self,
        plans: PlanCatalog,
        checkout: CheckoutInitiator,
        frontend_url: str,
        currency: str = "usd",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.plans = plans
        self.checkout = checkout
        self.frontend_url = frontend_url.rstrip("/")
        self.currency = currency
        self.clock = clock

    # --- checkout ---

    def create_intent(
        self,
        db: Session,
        owner: User,
        plan_key: str,
        client_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[Payment, CheckoutSession]:
        """
        Open a checkout session for ``plan_key`` and record a pending payment.

        The owner's entitlement is not touched here; only a completed payment
        changes it.
        """
        plan = self.plans.resolve(plan_key)

        session = self.checkout.create_session(
            amount=plan.amount,
            description=plan.description,
            success_url=f"{self.frontend_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.frontend_url}/payment-cancel",
            metadata={"user_id": str(owner.id), "plan": plan.key, "downloads": str(plan.downloads)},
            customer_email=owner.email,
            product_name=plan.name,
        )

        payment = Payment(
            user_id=owner.id,
            stripe_session_id=session.session_id,
            plan=plan.key,
            amount=plan.amount,
            currency=self.currency,
            status=PENDING,
            request_metadata={"ip_address": client_ip, "user_agent": user_agent},
        )
        db.add(payment)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError(f"Checkout session {session.session_id} is already recorded") from exc
        db.refresh(payment)

        logger.info(f"Payment {payment.id} pending: user={owner.id} plan={plan.key} session={session.session_id}")
        return payment, session

    # --- webhook reconciliation ---

    def reconcile(self, db: Session, event: PaymentEvent) -> str:
        """
        Apply a verified payment event.

        Returns the new status on a transition, ``duplicate`` when the event
        was already applied, ``unknown`` when no payment matches and
        ``ignored`` for event types the ledger does not handle. Raises
        ``ConflictError`` when the payment is in a state the event cannot
        move it out of.
        """
        transition = EVENT_TRANSITIONS.get(event.event_type)
        if transition is None:
            logger.debug(f"Ignoring payment event {event.event_type}")
            return IGNORED

        payment = self._find(db, event)
        if payment is None:
            logger.warning(
                f"No payment for event {event.event_type} "
                f"(session={event.session_id}, payment={event.payment_id})"
            )
            return UNKNOWN

        source, target = transition
        payment_id = payment.id
        values = {}
        if target == COMPLETED:
            values = {Payment.completed_at: self.clock()}
            if event.payment_id:
                values[Payment.stripe_payment_id] = event.payment_id

        moved = True
        try:
            self._transition(db, payment_id, source, target, values)
        except ConflictError:
            current = db.query(Payment.status).filter(Payment.id == payment_id).scalar()
            if current != target:
                logger.warning(f"Payment {payment_id} is {current}; cannot apply {event.event_type}")
                raise
            moved = False
            logger.info(f"Payment {payment_id} already {target}; duplicate {event.event_type}")

        if target == COMPLETED:
            granted = self._grant(db, payment_id, event.customer_id)
            return COMPLETED if (moved or granted) else DUPLICATE

        if target == REFUNDED and moved:
            logger.warning(f"Payment {payment_id} refunded; entitlement left in place for manual review")

        return target if moved else DUPLICATE

    def _find(self, db: Session, event: PaymentEvent) -> Optional[Payment]:
        query = db.query(Payment)
        if event.session_id:
            return query.filter(Payment.stripe_session_id == event.session_id).first()
        if event.payment_id:
            return query.filter(Payment.stripe_payment_id == event.payment_id).first()
        return None

    def _transition(self, db: Session, payment_id: int, source: str, target: str, values: dict) -> None:
        updated = (
            db.query(Payment)
            .filter(Payment.id == payment_id, Payment.status == source)
            .update({Payment.status: target, **values}, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            raise ConflictError(f"Payment {payment_id} is not {source}")
        db.commit()
        logger.info(f"Payment {payment_id}: {source} -> {target}")

    def _grant(self, db: Session, payment_id: int, customer_id: Optional[str]) -> bool:
        """
        Replace the owner's plan with the one this payment bought.

        The ``entitlement_granted`` flag flips in the same transaction as the
        user update, so the grant lands exactly once.
        """
        flagged = (
            db.query(Payment)
            .filter(
                Payment.id == payment_id,
                Payment.status == COMPLETED,
                Payment.entitlement_granted.is_(False),
            )
            .update({Payment.entitlement_granted: True}, synchronize_session=False)
        )
        if flagged != 1:
            db.rollback()
            return False

        payment = db.query(Payment).filter(Payment.id == payment_id).one()
        user = db.query(User).filter(User.id == payment.user_id).first()
        if user is None:
            db.rollback()
            logger.error(f"Payment {payment_id} belongs to missing user {payment.user_id}")
            return False

        plan = self.plans.resolve(payment.plan)
        user.plan = plan.key
        user.downloads_remaining = plan.downloads
        user.expires_at = _one_year_after(self.clock()) if plan.key == EXPIRING_PLAN else None
        if customer_id:
            user.stripe_customer_id = customer_id
        db.commit()

        logger.info(f"Granted {plan.key} ({plan.downloads} downloads) to user {user.id} from payment {payment_id}")
        return True

    # --- lookups ---

    def get_status(self, db: Session, intent_id: int, owner_id: int) -> Payment:
        payment = db.query(Payment).filter(Payment.id == intent_id).first()
        if payment is None or payment.user_id != owner_id:
            raise NotFoundError("Payment not found")
        return payment
