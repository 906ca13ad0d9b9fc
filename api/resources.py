# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_office, require_staff
from core.database import get_db
from models.resource import Team, Worker
from models.user import User
from schemas.resource import ResourceRecord, ResourceResponse
from services.resource_service import ResourceService

router = APIRouter(tags=["resources"])


@router.get("/workers", response_model=list[ResourceResponse])
def list_workers(db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return ResourceService.list_resources(Worker, db)


@router.put("/workers", response_model=list[ResourceResponse])
def replace_workers(
    payload: List[ResourceRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    return ResourceService.replace_all(Worker, payload, db)


@router.get("/teams", response_model=list[ResourceResponse])
def list_teams(db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return ResourceService.list_resources(Team, db)


@router.put("/teams", response_model=list[ResourceResponse])
def replace_teams(
    payload: List[ResourceRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    return ResourceService.replace_all(Team, payload, db)
