"""Messaging between report owners and other users."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.message import Message
from app.models.report import Report
from app.schemas.message import MessageCreate


class MessageRecipientError(Exception):
    """Raised when a message cannot be delivered to the report owner."""


def send_message(db: Session, sender_id: str, message_input: MessageCreate) -> Message | None:
    """Persist a message to the owner of the referenced report."""

    report = db.get(Report, message_input.report_id)
    if report is None:
        return None
    if report.user_id == sender_id:
        raise MessageRecipientError("You cannot send a message about your own report")
    message = Message(
        sender_id=sender_id,
        recipient_id=report.user_id,
        report_id=report.id,
        subject=message_input.subject or "Message about your report",
        body=message_input.body,
        message_type=message_input.message_type,
        priority=message_input.priority,
        timestamp=datetime.now(timezone.utc),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def list_inbox(db: Session, user_id: str) -> list[Message]:
    """Return non-deleted messages addressed to a user, newest first."""

    stmt = (
        select(Message)
        .where(Message.recipient_id == user_id, Message.deleted.is_(False))
        .order_by(Message.timestamp.desc(), Message.id.desc())
    )
    return list(db.scalars(stmt).all())


def count_unread(db: Session, user_id: str) -> int:
    stmt = select(func.count()).select_from(Message).where(
        Message.recipient_id == user_id,
        Message.read.is_(False),
        Message.deleted.is_(False),
    )
    return int(db.scalar(stmt) or 0)


def mark_read(db: Session, message_id: int, user_id: str) -> Message | None:
    message = _get_inbox_message(db, message_id, user_id)
    if message is None:
        return None
    if not message.read:
        message.read = True
        message.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(message)
    return message


def delete_message(db: Session, message_id: int, user_id: str) -> bool:
    """Soft-delete one inbox message."""

    message = _get_inbox_message(db, message_id, user_id)
    if message is None:
        return False
    message.deleted = True
    db.commit()
    return True


def _get_inbox_message(db: Session, message_id: int, user_id: str) -> Message | None:
    message = db.get(Message, message_id)
    if message is None or message.deleted or message.recipient_id != user_id:
        return None
    return message
