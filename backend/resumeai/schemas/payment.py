from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
from datetime import datetime

# For POST /api/payment/create-checkout
class CheckoutRequest(BaseModel):
    plan: str

class CheckoutResponse(BaseModel):
    sessionId: str
    url: str
    paymentId: int

class Payment(BaseModel):
    id: int
    user_id: int
    plan: str
    amount: int
    currency: str
    status: str
    stripe_session_id: str
    stripe_payment_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="request_metadata")
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
