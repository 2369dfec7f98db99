"""Match listing and decision routes."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_current_user_id, get_db
from app.schemas.common import ApiResponse
from app.schemas.match import MatchRead
from app.services.matches import (
    MatchPermissionError,
    MatchStateError,
    confirm_match,
    get_match,
    list_matches_for_user,
    reject_match,
    return_match,
)


router = APIRouter(prefix="/matches")


@router.get("", response_model=ApiResponse[list[MatchRead]])
def get_matches(
    status: Literal["pending", "confirmed", "rejected", "expired"] | None = Query(default="pending"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[list[MatchRead]]:
    """List matches involving the caller's reports."""

    matches = list_matches_for_user(db, user_id, status=status)
    return ApiResponse(data=[MatchRead.model_validate(match) for match in matches])


@router.get("/{match_id}", response_model=ApiResponse[MatchRead])
def read_match(
    match_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MatchRead]:
    """Read one match the caller is a party to."""

    try:
        match = get_match(db, match_id, user_id)
    except MatchPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return ApiResponse(data=MatchRead.model_validate(match))


@router.post("/{match_id}/confirm", response_model=ApiResponse[MatchRead])
def confirm(
    match_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MatchRead]:
    """Confirm a pending match as the lost-phone owner."""

    try:
        match = confirm_match(db, match_id, user_id)
    except MatchPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except MatchStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return ApiResponse(data=MatchRead.model_validate(match))


@router.post("/{match_id}/reject", response_model=ApiResponse[MatchRead])
def reject(
    match_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MatchRead]:
    """Reject a pending match as the lost-phone owner."""

    try:
        match = reject_match(db, match_id, user_id)
    except MatchPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except MatchStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return ApiResponse(data=MatchRead.model_validate(match))


@router.post("/{match_id}/return", response_model=ApiResponse[MatchRead])
def mark_returned(
    match_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[MatchRead]:
    """Mark the phone as handed back; either party may close the case."""

    try:
        match = return_match(db, match_id, user_id)
    except MatchPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except MatchStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return ApiResponse(data=MatchRead.model_validate(match))
