# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_office, require_staff
from core.database import get_db
from models.user import User
from schemas.vessel import VesselRecord, VesselResponse
from services.container_service import VesselService

router = APIRouter(prefix="/vessels", tags=["vessels"])


@router.get("/", response_model=list[VesselResponse])
def list_vessels(db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return VesselService.list_vessels(db)


@router.post("/", response_model=list[VesselResponse])
def upsert_vessels(
    payload: List[VesselRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Insert or update vessels by id."""
    return VesselService.bulk_upsert(payload, db)
