import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app import config
from app.database import get_db
from app.crud import application_crud, payment_crud, task_crud
from app.models.user import User
from app.schema.payment_schema import (
    PaymentConfirm,
    PaymentConfirmResponse,
    PaymentCreate,
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentResponse,
)
from app.services import task_workflow
from app.utils.exceptions import NotFoundError, PaymentGatewayError, ValidationError
from app.utils.payment_gateway import StripeGateway, get_payment_gateway
from app.utils.permissions import authorize
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])

SIMULATED_REFERENCE = "simulated-payment"


def _load_application_with_task(db: Session, application_id: int):
    application = application_crud.get_application(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    task = task_crud.get_task(db, application.task_id)
    if not task:
        raise NotFoundError("Task not found")
    return application, task


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def record_payment(
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Manual payment record; completes the task like the gateway path"""
    _, task = _load_application_with_task(db, payment_data.application_id)
    authorize(current_user, "payment:record", task)

    result = task_workflow.confirm_payment(
        db,
        application_id=payment_data.application_id,
        amount=payment_data.amount,
        reference="manual"
    )
    return result.payment


@router.get("/payments/application/{application_id}", response_model=List[PaymentResponse])
def get_application_payments(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application, _ = _load_application_with_task(db, application_id)
    authorize(current_user, "payment:view", application)
    return payment_crud.get_application_payments(db, application_id)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    intent_data: PaymentIntentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: Optional[StripeGateway] = Depends(get_payment_gateway)
):
    """Open a gateway checkout session for an accepted application"""
    if intent_data.application_id is None or intent_data.amount is None:
        raise ValidationError("application_id and amount are required")

    application, task = _load_application_with_task(db, intent_data.application_id)
    authorize(current_user, "payment:start", task)

    if gateway is None:
        raise PaymentGatewayError("Payment gateway is not configured")

    intent = gateway.create_payment_intent(
        amount=intent_data.amount,
        currency=config.PAYMENT_CURRENCY,
        metadata={"application_id": application.id, "task_id": task.id}
    )
    logger.info("Created payment intent %s for application %s", intent.get("id"), application.id)

    return PaymentIntentResponse(
        client_secret=intent.get("client_secret"),
        payment_intent_id=intent["id"]
    )


@router.post("/payment-confirm", response_model=PaymentConfirmResponse)
def confirm_payment(
    confirm_data: PaymentConfirm,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: Optional[StripeGateway] = Depends(get_payment_gateway)
):
    """
    Finalize a payment and complete the task.

    A payment intent is verified against the gateway when one is given.
    Without a verified intent the request is treated as a simulated
    payment, which only goes through while ALLOW_SIMULATED_PAYMENTS is on.
    A gateway failure is tolerated only for an explicitly simulated payment.
    """
    if confirm_data.application_id is None:
        raise ValidationError("application_id is required")

    amount = confirm_data.amount
    reference = SIMULATED_REFERENCE
    verified = False

    if confirm_data.payment_intent_id and gateway is not None:
        try:
            intent = gateway.retrieve_payment_intent(confirm_data.payment_intent_id)
        except PaymentGatewayError:
            if not (confirm_data.simulated_payment and config.ALLOW_SIMULATED_PAYMENTS):
                raise
            logger.warning(
                "Gateway verification failed for intent %s; continuing as simulated payment",
                confirm_data.payment_intent_id
            )
        else:
            if intent.get("status") != "succeeded":
                raise ValidationError("Payment has not been completed")
            amount = intent.get("amount", 0) / 100
            reference = intent.get("id", confirm_data.payment_intent_id)
            verified = True

    if not verified:
        if amount is None:
            raise ValidationError("amount is required")
        if not config.ALLOW_SIMULATED_PAYMENTS:
            raise ValidationError("Simulated payments are disabled")
        logger.info(
            "Confirming unverified payment for application %s by user %s",
            confirm_data.application_id, current_user.id
        )

    result = task_workflow.confirm_payment(
        db,
        application_id=confirm_data.application_id,
        amount=amount,
        reference=reference
    )

    return PaymentConfirmResponse(
        success=True,
        message="Payment confirmed and task marked as completed",
        payment=PaymentResponse.model_validate(result.payment)
    )
