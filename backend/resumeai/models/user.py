from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(255), default="")
    last_name = Column(String(255), default="")
    phone = Column(String(50), nullable=True)

    # Entitlement: written only by the payment ledger
    plan = Column(String(20), nullable=False, default="free")  # free, single, pro, annual
    downloads_remaining = Column(Integer, nullable=False, default=0)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=True)  # annual plan only
    stripe_customer_id = Column(String(255), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=True, onupdate=func.now())
