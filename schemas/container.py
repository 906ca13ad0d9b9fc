"""
Pydantic schemas for Container records.
Integrates with models.container for single source of truth on Enums.
"""
from datetime import datetime

# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0


from typing import Optional, List

from pydantic import BaseModel, Field, field_validator, ConfigDict

from models.container import UnitType, ContainerStatus
from schemas.validators import coerce_names
from services.date_service import normalize_date


class ContainerBase(BaseModel):
    """Fields shared by bulk writes and responses."""
    vessel_id: str
    unit_type: UnitType = UnitType.CONTAINER
    container_no: str = Field(..., min_length=1, max_length=50)
    plan_date: str = ""
    size: Optional[str] = None
    seal_no: Optional[str] = None
    consignee: Optional[str] = None
    carrier: Optional[str] = None
    bill_no: Optional[str] = None
    vendor: Optional[str] = None
    pkgs: int = Field(0, ge=0)
    weight: float = Field(0.0, ge=0)
    tk_nha_vc: Optional[str] = None
    ngay_tk_nha_vc: Optional[str] = None
    tk_dnl_ola: Optional[str] = None
    ngay_tk_dnl: Optional[str] = None
    det_expiry: Optional[str] = None
    empty_return_place: Optional[str] = None
    status: ContainerStatus = ContainerStatus.PENDING
    tally_approved: bool = False
    work_order_approved: bool = False
    remarks: Optional[str] = None
    worker_names: List[str] = Field(default_factory=list)
    last_urged_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("container_no", mode="before")
    @classmethod
    def strip_container_no(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator("plan_date", "ngay_tk_nha_vc", "ngay_tk_dnl", "det_expiry", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        if v is None:
            return v
        return normalize_date(v)

    @field_validator("worker_names", mode="before")
    @classmethod
    def normalize_worker_names(cls, v):
        return coerce_names(v)


class ContainerRecord(ContainerBase):
    """Bulk replace / upsert payload. A missing id is assigned on insert."""
    id: Optional[str] = None


class ContainerUpdate(BaseModel):
    """Single-record update path: status, approval flags and crew notes only."""
    status: Optional[ContainerStatus] = None
    tally_approved: Optional[bool] = None
    work_order_approved: Optional[bool] = None
    remarks: Optional[str] = None
    worker_names: Optional[List[str]] = None
    last_urged_at: Optional[datetime] = None

    @field_validator("worker_names", mode="before")
    @classmethod
    def normalize_worker_names(cls, v):
        if v is None:
            return v
        return coerce_names(v)


class ContainerResponse(ContainerBase):
    id: str
    updated_at: Optional[datetime] = None


class ContainerBoardRow(BaseModel):
    """Operations board entry with derived signals."""
    container: ContainerResponse
    det_status: str
    is_exploitable: bool


class ImportRowError(BaseModel):
    row: int
    error: str


class ImportSummary(BaseModel):
    vessel_id: str
    imported: int
    total_pkgs: int
    total_weight: float
    skipped: int
    errors: List[ImportRowError] = Field(default_factory=list)
