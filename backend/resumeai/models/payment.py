from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base, JSONType

PENDING = "pending"
COMPLETED = "completed"
FAILED = "failed"
REFUNDED = "refunded"

class Payment(Base):
    """A payment intent: one checkout attempt for one plan."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    stripe_session_id = Column(String(255), unique=True, index=True, nullable=False)
    stripe_payment_id = Column(String(255), nullable=True, index=True)

    plan = Column(String(20), nullable=False)  # single, pro, annual
    amount = Column(Integer, nullable=False)  # minor currency units
    currency = Column(String(10), nullable=False, default="usd")
    status = Column(String(20), nullable=False, default=PENDING)
    entitlement_granted = Column(Boolean, nullable=False, default=False)

    # "metadata" is reserved on declarative classes
    request_metadata = Column("metadata", JSONType, nullable=True)  # ip_address, user_agent

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(TIMESTAMP(timezone=True), nullable=True)
