# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from api.dependencies import require_office, require_staff
from core.database import get_db
from models.user import User
from schemas.container import (
    ContainerBoardRow,
    ContainerRecord,
    ContainerResponse,
    ContainerUpdate,
    ImportSummary,
)
from services.container_import_service import ContainerImportService, build_import_template
from services.container_service import ContainerService
from services.detention_service import (
    OPERATION_FILTERS,
    DetentionService,
    available_containers,
    operations_board,
)

router = APIRouter(prefix="/containers", tags=["containers"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _summary(vessel_id: str, result) -> ImportSummary:
    return ImportSummary(vessel_id=vessel_id, **result.summary)


@router.get("/", response_model=list[ContainerResponse])
def list_containers(
    vessel_id: Optional[str] = None,
    consignee: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ContainerService.list_containers(db, vessel_id, consignee)


@router.get("/operations", response_model=list[ContainerBoardRow])
def operations(
    status: str = Query("ALL"),
    search: str = "",
    vessel_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Operations board: most urgent DET first, completed last."""
    if status not in OPERATION_FILTERS:
        raise HTTPException(status_code=400, detail=f"Unknown status filter: {status}")

    rows = operations_board(ContainerService.list_containers(db), status, search, vessel_id)
    return [
        ContainerBoardRow(
            container=ContainerResponse.model_validate(row["container"]),
            det_status=row["det_status"],
            is_exploitable=row["is_exploitable"],
        )
        for row in rows
    ]


@router.get("/available", response_model=list[ContainerResponse])
def available(
    vessel_id: Optional[str] = None,
    search: str = "",
    exclude: List[str] = Query(default=[]),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Containers an inspector may add to a tally report."""
    return available_containers(ContainerService.list_containers(db, vessel_id), exclude, search)


@router.get("/import-template")
def import_template(current_user: User = Depends(require_staff)):
    return Response(
        content=build_import_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=Template_Import_Container.xlsx"}
    )


@router.post("/import/{vessel_id}", response_model=ImportSummary)
async def import_workbook(
    vessel_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Merge an .xlsx container plan into the vessel's containers."""
    content = await file.read()
    result = ContainerImportService.import_workbook(vessel_id, content, db)
    return _summary(vessel_id, result)


@router.post("/import/{vessel_id}/rows", response_model=ImportSummary)
def import_rows(
    vessel_id: str,
    rows: List[Dict[str, Any]],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Same merge as the workbook upload, for rows already parsed by the client."""
    result = ContainerImportService.import_rows(vessel_id, rows, db)
    return _summary(vessel_id, result)


@router.put("/vessel/{vessel_id}", response_model=list[ContainerResponse])
def replace_vessel_containers(
    vessel_id: str,
    payload: List[ContainerRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    return ContainerService.replace_vessel_containers(vessel_id, payload, db)


@router.post("/", response_model=list[ContainerResponse])
def upsert_containers(
    payload: List[ContainerRecord],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    return ContainerService.bulk_upsert(payload, db)


@router.patch("/{container_id}", response_model=ContainerResponse)
def update_container(
    container_id: str,
    payload: ContainerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ContainerService.update_container(container_id, payload, db)


@router.post("/{container_id}/urge", response_model=ContainerResponse)
def urge_container(
    container_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_office)
):
    """Flag a container so inspectors see it first."""
    return DetentionService.urge_container(container_id, db)
