import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.crud import application_crud, message_crud
from app.models.application import Application
from app.models.user import User
from app.schema.message_schema import MessageCreate, MessageResponse
from app.services import notifier
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.permissions import authorize
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])


def _load_conversation(db: Session, application_id: int) -> Application:
    application = application_crud.get_application(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    if application.task is None:
        raise NotFoundError("Task not found")
    return application


@router.get("/{application_id}", response_model=List[MessageResponse])
def get_messages(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Durable chat history for an application, oldest first.
    Clients poll this to reconcile anything the relay did not push.
    """
    application = _load_conversation(db, application_id)
    authorize(current_user, "message:read", application)
    return message_crud.get_application_messages(db, application_id)


@router.post("", response_model=MessageResponse, status_code=201)
def send_message(
    message_data: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Store a chat message. The sender then pushes the returned object
    through the relay socket for instant delivery.
    """
    application = _load_conversation(db, message_data.application_id)
    authorize(current_user, "message:send", application)

    employer_id = application.task.employer_id
    counterpart = employer_id if current_user.id == application.student_id else application.student_id

    receiver_id = message_data.receiver_id if message_data.receiver_id is not None else counterpart
    if receiver_id != counterpart:
        raise ValidationError("Receiver must be the other participant of this application")

    message = message_crud.create_message(
        db,
        application_id=application.id,
        sender_id=current_user.id,
        receiver_id=receiver_id,
        content=message_data.content
    )

    notifier.notify(
        db,
        user_id=receiver_id,
        type="new_message",
        content="You have a new message",
        metadata={
            "task_id": application.task_id,
            "application_id": application.id,
            "message_id": message.id,
        }
    )

    return message


@router.patch("/{message_id}/read", response_model=MessageResponse)
def mark_message_read(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    message = message_crud.get_message(db, message_id)
    if not message:
        raise NotFoundError("Message not found")
    authorize(current_user, "message:mark_read", message)
    return message_crud.mark_message_as_read(db, message_id)
