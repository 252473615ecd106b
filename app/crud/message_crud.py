from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.message import Message
from app.utils.exceptions import NotFoundError


def create_message(
    db: Session,
    application_id: int,
    sender_id: int,
    receiver_id: int,
    content: str
) -> Message:
    message = Message(
        application_id=application_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        is_read=False
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def get_message(db: Session, message_id: int) -> Optional[Message]:
    return db.get(Message, message_id)


def get_application_messages(db: Session, application_id: int) -> List[Message]:
    """Conversation history, oldest first"""
    return db.query(Message).filter(
        Message.application_id == application_id
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()


def mark_message_as_read(db: Session, message_id: int) -> Message:
    message = get_message(db, message_id)
    if not message:
        raise NotFoundError("Message not found")

    message.is_read = True
    db.commit()
    db.refresh(message)
    return message
