"""
Pytest configuration and shared fixtures.
"""

import os

# Settings are read at import time, so the environment has to be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import hashlib
import hmac
import json
import time
from datetime import datetime, timezone
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from resumeai.database import Base, SessionLocal, engine
from resumeai.main import app
from resumeai.api.deps import get_ledger
from resumeai.models.user import User
from resumeai.services.billing import DEFAULT_PLANS, CheckoutSession, EntitlementLedger
from resumeai.utils.auth import create_token, get_password_hash

WEBHOOK_SECRET = "whsec_test_secret"
FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeCheckout:
    """Checkout initiator that records calls instead of talking to Stripe."""

    def __init__(self, session_id: str = None):
        self.fixed_session_id = session_id
        self.calls = []

    def create_session(self, amount, description, success_url, cancel_url, metadata,
                       customer_email=None, product_name=None):
        self.calls.append({
            "amount": amount,
            "description": description,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "customer_email": customer_email,
            "product_name": product_name,
        })
        session_id = self.fixed_session_id or f"cs_test_{len(self.calls)}"
        return CheckoutSession(session_id=session_id, url=f"https://checkout.stripe.test/{session_id}")


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header for the payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_event(session_id: str, event_type: str = "checkout.session.completed",
                   payment_intent: str = "pi_test_1", customer: str = "cus_test_1") -> bytes:
    """Serialized Stripe event wrapping a checkout session."""
    return json.dumps({
        "id": "evt_test_1",
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "payment_intent": payment_intent,
                "customer": customer,
            }
        },
    }).encode("utf-8")


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def user(db) -> User:
    account = User(
        email="ada@resumeai.io",
        password_hash=get_password_hash("secret-pass"),
        first_name="Ada",
        last_name="Lovelace",
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def other_user(db) -> User:
    account = User(email="grace@resumeai.io", password_hash=get_password_hash("secret-pass"))
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def checkout() -> FakeCheckout:
    return FakeCheckout()


@pytest.fixture
def ledger(checkout) -> EntitlementLedger:
    return EntitlementLedger(DEFAULT_PLANS, checkout, "http://localhost:3000", clock=lambda: FIXED_NOW)


@pytest.fixture
def client(ledger) -> TestClient:
    app.dependency_overrides[get_ledger] = lambda: ledger
    return TestClient(app)


@pytest.fixture
def auth_headers(user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user.id)}"}


@pytest.fixture
def other_headers(other_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(other_user.id)}"}


@pytest.fixture
def empty_resume() -> Dict[str, Any]:
    return {"personal": {}, "experience": [], "education": [], "skills": []}


@pytest.fixture
def complete_resume() -> Dict[str, Any]:
    """
    Resume that meets every format and content condition, with 6 skills and
    two of the six action verbs ("managed", "developed").
    """
    filler = " ".join(["shipping"] * 150)
    return {
        "template": "modern",
        "personal": {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "a@b.com",
            "phone": "1234567890",
            "location": "London",
            "summary": "Platform engineer who managed teams and developed tooling ok",
            "portfolio": None,
        },
        "experience": [
            {"title": "Lead", "company": "Acme", "startDate": "2020", "endDate": "2024", "description": filler},
            {"title": "Engineer", "company": "Beta", "startDate": "2017", "endDate": "2020", "description": filler},
            {"title": "Intern", "company": "Gamma", "startDate": "2016", "endDate": "2017",
             "description": "Built internal dashboards"},
        ],
        "education": [
            {"school": "Cambridge", "degree": "BSc", "field": "Mathematics", "graduationDate": "2016"},
            {"school": "Cambridge", "degree": "MSc", "field": "Mathematics", "graduationDate": "2017"},
        ],
        "skills": ["Python", "SQL", "Docker", "AWS", "Git", "Linux"],
    }
