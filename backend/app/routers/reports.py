"""Report submission and browsing routes."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from app.db.dependencies import get_current_user_id, get_db
from app.schemas.common import ApiResponse
from app.schemas.match import MatchRead
from app.schemas.report import (
    ReportCreate,
    ReportRead,
    ReportStats,
    ReportStatusUpdate,
    ReportSubmissionResult,
)
from app.services.matches import MatchPermissionError, list_matches_for_report
from app.services.reports import (
    ReportPermissionError,
    get_report,
    get_report_stats,
    list_reports,
    list_user_reports,
    record_report_view,
    rematch_report,
    search_reports,
    submit_report,
    update_report_status,
)


router = APIRouter(prefix="/reports")


@router.post("", response_model=ApiResponse[ReportSubmissionResult], status_code=201)
def create_report(
    payload: ReportCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportSubmissionResult]:
    """Store a report and run automatic matching."""

    return ApiResponse(data=submit_report(db, user_id, payload))


@router.get("", response_model=ApiResponse[list[ReportRead]])
def get_reports(
    report_type: Literal["lost", "found"] | None = Query(default=None, alias="type"),
    brand: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ReportRead]]:
    """List active reports."""

    records = list_reports(db, report_type=report_type, brand=brand, limit=limit, offset=offset)
    return ApiResponse(data=[ReportRead.model_validate(record) for record in records])


@router.get("/search", response_model=ApiResponse[list[ReportRead]])
def search(
    q: str = Query(..., min_length=1),
    report_type: Literal["lost", "found"] | None = Query(default=None, alias="type"),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ReportRead]]:
    records = search_reports(db, q, report_type=report_type, limit=limit)
    return ApiResponse(data=[ReportRead.model_validate(record) for record in records])


@router.get("/stats", response_model=ApiResponse[ReportStats])
def stats(db: Session = Depends(get_db)) -> ApiResponse[ReportStats]:
    return ApiResponse(data=get_report_stats(db))


@router.get("/mine", response_model=ApiResponse[list[ReportRead]])
def my_reports(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ReportRead]]:
    """List the caller's own reports."""

    return ApiResponse(data=[ReportRead.model_validate(record) for record in list_user_reports(db, user_id)])


@router.get("/{report_id}", response_model=ApiResponse[ReportRead])
def read_report(
    report_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportRead]:
    report = get_report(db, report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(data=ReportRead.model_validate(report))


@router.get("/{report_id}/matches", response_model=ApiResponse[list[MatchRead]])
def read_report_matches(
    report_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[list[MatchRead]]:
    """List live matches on either side of one of the caller's reports."""

    try:
        matches = list_matches_for_report(db, report_id, user_id)
    except MatchPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if matches is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(data=[MatchRead.model_validate(match) for match in matches])


@router.post("/{report_id}/rematch", response_model=ApiResponse[ReportSubmissionResult])
def rerun_report_matching(
    report_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportSubmissionResult]:
    """Match one of the caller's active reports against the current pool again."""

    try:
        created = rematch_report(db, report_id, user_id)
    except ReportPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if created is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(
        data=ReportSubmissionResult(
            report_id=report_id,
            matches=created,
            message=f"Matching rerun found {created} new potential match(es).",
        )
    )


@router.post("/{report_id}/view", response_model=ApiResponse[ReportRead])
def view_report(
    report_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportRead]:
    report = record_report_view(db, report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(data=ReportRead.model_validate(report))


@router.patch("/{report_id}/status", response_model=ApiResponse[ReportRead])
def change_report_status(
    payload: ReportStatusUpdate,
    report_id: int = Path(..., ge=1),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> ApiResponse[ReportRead]:
    """Resolve, expire, or delete one of the caller's reports."""

    try:
        report = update_report_status(db, report_id, user_id, payload.status)
    except ReportPermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ApiResponse(data=ReportRead.model_validate(report))
