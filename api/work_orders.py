# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_office, require_staff
from core.database import get_db
from models.user import User
from schemas.work_order import WorkOrderRecord, WorkOrderResponse
from services.work_order_service import WorkOrderService

router = APIRouter(prefix="/work-orders", tags=["work-orders"])


@router.get("/", response_model=list[WorkOrderResponse])
def list_work_orders(
    vessel_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return WorkOrderService.list_work_orders(db, vessel_id)


@router.put("/", response_model=list[WorkOrderResponse])
def replace_work_orders(
    payload: List[WorkOrderRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    return WorkOrderService.replace_all(payload, db)


@router.post("/", response_model=WorkOrderResponse)
def upsert_work_order(
    payload: WorkOrderRecord,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return WorkOrderService.upsert_one(payload, db)
