from pydantic import BaseModel, Field
from typing import Optional
from app.utils.dates import UTCDateTime
from app.models.payment import PaymentStatus


class PaymentCreate(BaseModel):
    """Legacy manual payment record"""
    application_id: int
    amount: float = Field(..., gt=0)


class PaymentIntentCreate(BaseModel):
    application_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)


class PaymentIntentResponse(BaseModel):
    client_secret: Optional[str]
    payment_intent_id: str


class PaymentConfirm(BaseModel):
    application_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)
    simulated_payment: bool = False
    payment_intent_id: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    application_id: int
    amount: float
    status: PaymentStatus
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class PaymentConfirmResponse(BaseModel):
    success: bool
    message: str
    payment: PaymentResponse
