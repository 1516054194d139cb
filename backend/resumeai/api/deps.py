from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError

from ..database import SessionLocal
from ..config import settings
from ..models.user import User as UserModel
from ..services.billing import DEFAULT_PLANS, EntitlementLedger, StripeCheckout, StripeWebhookVerifier
from ..utils.auth import ACCESS, decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> UserModel:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token, ACCESS)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise credentials_exception
    return user

def get_ledger() -> EntitlementLedger:
    checkout = StripeCheckout(settings.STRIPE_SECRET_KEY, currency=settings.CURRENCY)
    return EntitlementLedger(DEFAULT_PLANS, checkout, settings.FRONTEND_URL, currency=settings.CURRENCY)

def get_webhook_verifier() -> StripeWebhookVerifier:
    return StripeWebhookVerifier(settings.STRIPE_WEBHOOK_SECRET)
