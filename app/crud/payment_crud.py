from sqlalchemy.orm import Session
from typing import List
from app.models.payment import Payment, PaymentStatus


def create_payment(
    db: Session,
    application_id: int,
    amount: float,
    status: PaymentStatus = PaymentStatus.PENDING,
    commit: bool = True
) -> Payment:
    payment = Payment(application_id=application_id, amount=amount, status=status)
    db.add(payment)
    if commit:
        db.commit()
        db.refresh(payment)
    else:
        db.flush()
    return payment


def get_application_payments(db: Session, application_id: int) -> List[Payment]:
    return db.query(Payment).filter(
        Payment.application_id == application_id
    ).order_by(Payment.id).all()
