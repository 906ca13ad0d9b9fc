# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from api.dependencies import require_office
from core.database import get_db
from models.container import Container
from models.user import User
from models.work_order import WorkOrder
from schemas.statistics import MechanicalStatsResponse, WorkerStatsResponse
from services.statistics_service import (
    StatisticsFilter,
    aggregate_mechanical_stats,
    aggregate_worker_stats,
    compute_totals,
    export_rows,
)

router = APIRouter(prefix="/statistics", tags=["statistics"])

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _filters(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    names: List[str] = Query(default=[]),
) -> StatisticsFilter:
    return StatisticsFilter(month=month, year=year, start_date=start_date, end_date=end_date, names=names)


def _rows(kind: str, filters: StatisticsFilter, db: Session):
    work_orders = db.query(WorkOrder).all()
    if kind == "WORKER":
        return aggregate_worker_stats(work_orders, filters)
    return aggregate_mechanical_stats(work_orders, db.query(Container).all(), filters)


@router.get("/workers", response_model=WorkerStatsResponse)
def worker_statistics(
    filters: StatisticsFilter = Depends(_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Shifts per worker, split by normal / weekend / holiday."""
    rows = _rows("WORKER", filters, db)
    return {"rows": [vars(r) for r in rows], "totals": compute_totals(rows)}


@router.get("/mechanical", response_model=MechanicalStatsResponse)
def mechanical_statistics(
    filters: StatisticsFilter = Depends(_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Tonnage per operator, split by normal / weekend / holiday."""
    rows = _rows("MECHANICAL", filters, db)
    return {"rows": [vars(r) for r in rows], "totals": compute_totals(rows)}


@router.get("/{kind}/export")
def export_statistics(
    kind: str,
    fmt: str = "csv",
    filters: StatisticsFilter = Depends(_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    kinds = {"workers": "WORKER", "mechanical": "MECHANICAL"}
    if kind not in kinds or fmt not in EXPORT_MEDIA_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported export")

    rows = _rows(kinds[kind], filters, db)
    return Response(
        content=export_rows(kinds[kind], rows, fmt),
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename=San_Luong_{kinds[kind]}.{fmt}"}
    )
