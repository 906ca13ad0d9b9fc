# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from api.dependencies import require_office, require_staff
from core.database import get_db
from models.user import User
from schemas.container import ContainerResponse
from schemas.tally_report import (
    AddTallyItem,
    ApproveRequest,
    TallyGroupResponse,
    TallyReportRecord,
    TallyReportResponse,
    TallyReportSave,
)
from services.reporting_service import ReportingService
from services.tally_service import TallyReportGroup, TallyService

router = APIRouter(prefix="/tally-reports", tags=["tally-reports"])


def _group_response(group: TallyReportGroup) -> TallyGroupResponse:
    return TallyGroupResponse(
        **{k: v for k, v in vars(group).items() if k != "number"},
        total_units=group.total_units,
        total_weight=group.total_weight,
    )


@router.get("/", response_model=list[TallyReportResponse])
def list_reports(db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return TallyService.list_reports(db)


@router.get("/groups", response_model=list[TallyGroupResponse])
def list_groups(
    mode: Optional[str] = None,
    vessel_id: Optional[str] = None,
    date: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    report_no: Optional[str] = None,
    consignee: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Numbered report groups, newest first."""
    groups = TallyService.list_groups(
        db, mode=mode, vessel_id=vessel_id, date=date, start_date=start_date,
        end_date=end_date, report_no=report_no, consignee=consignee,
    )
    return [_group_response(g) for g in groups]


@router.get("/groups/{report_id}/pdf")
def group_pdf(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    group = TallyService.get_group(report_id, db)
    filename = group.report_no.replace(" ", "")
    return Response(
        content=ReportingService.render_tally_pdf(group),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=PKH_{filename}.pdf"}
    )


@router.put("/", response_model=list[TallyReportResponse])
def replace_reports(
    payload: List[TallyReportRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Replace the whole report collection."""
    return TallyService.replace_all(payload, db)


@router.post("/", response_model=TallyReportResponse)
def save_report(
    payload: TallyReportSave,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Save one report (draft or final) and its derived work orders."""
    user_name = getattr(current_user, "name", None) or current_user.username
    return TallyService.save_report(payload, db, user_name)


@router.post("/{report_id}/items", response_model=TallyReportResponse)
def add_item(
    report_id: str,
    payload: AddTallyItem,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return TallyService.add_container_item(report_id, payload, db)


@router.post("/approve")
def approve_reports(
    payload: ApproveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Approve reports and complete the containers they counted."""
    reports, containers = TallyService.approve(payload.report_ids, db)
    return {
        "approved": [r.id for r in reports],
        "containers": [ContainerResponse.model_validate(c) for c in containers],
    }
