"""Inbox and messaging routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from app.db.dependencies import get_current_user_id, get_db
from app.schemas.common import ApiResponse, DeleteResult
from app.schemas.message import MessageCreate, MessageRead, UnreadCount
from app.services.messages import (
    MessageRecipientError,
    count_unread,
    delete_message,
    list_inbox,
    mark_read,
    send_message,
)


router = APIRouter(prefix="/messages")


@router.post("", response_model=ApiResponse[MessageRead], status_code=201)
def post_message(
    payload: MessageCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MessageRead]:
    """Send a message to the owner of a report."""

    try:
        message = send_message(db, user_id, payload)
    except MessageRecipientError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if message is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(data=MessageRead.model_validate(message))


@router.get("", response_model=ApiResponse[list[MessageRead]])
def get_inbox(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[list[MessageRead]]:
    return ApiResponse(data=[MessageRead.model_validate(message) for message in list_inbox(db, user_id)])


@router.get("/count", response_model=ApiResponse[UnreadCount])
def get_unread_count(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[UnreadCount]:
    return ApiResponse(data=UnreadCount(unread=count_unread(db, user_id)))


@router.post("/{message_id}/read", response_model=ApiResponse[MessageRead])
def read_message(
    message_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MessageRead]:
    message = mark_read(db, message_id, user_id)
    if message is None:
        raise HTTPException(status_code=404, detail="Message not found")
    return ApiResponse(data=MessageRead.model_validate(message))


@router.delete("/{message_id}", response_model=ApiResponse[DeleteResult])
def remove_message(
    message_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[DeleteResult]:
    if not delete_message(db, message_id, user_id):
        raise HTTPException(status_code=404, detail="Message not found")
    return ApiResponse(data=DeleteResult(id=message_id, deleted=True))
