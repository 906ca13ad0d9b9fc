"""
Pydantic schemas for tally reports and their printable groups.
"""
# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.tally_report import TallyMode, TallyStatus
from schemas.validators import parse_json_list, split_names
from services.date_service import normalize_date


class TallyItem(BaseModel):
    cont_id: Optional[str] = None
    cont_no: str
    seal_no: Optional[str] = None
    actual_units: int = Field(0, ge=0)
    actual_weight: float = Field(0.0, ge=0)
    is_scratched_floor: bool = False
    torn_units: int = Field(0, ge=0)
    notes: Optional[str] = None


class TallyReportBase(BaseModel):
    vessel_id: str
    mode: TallyMode = TallyMode.NHAP
    shift: str = "1"
    work_date: str
    owner: Optional[str] = None
    worker_count: int = Field(0, ge=0)
    worker_names: str = ""
    mechanical_count: int = Field(0, ge=0)
    mechanical_names: str = ""
    equipment: Optional[str] = None
    vehicle_no: Optional[str] = None
    vehicle_type: Optional[str] = None
    ship_no: Optional[str] = None
    items: List[TallyItem] = Field(default_factory=list)
    is_holiday: Optional[bool] = None
    is_weekend: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("work_date", mode="before")
    @classmethod
    def normalize_work_date(cls, v):
        normalized = normalize_date(v)
        if not normalized:
            raise ValueError("work_date is not a recognizable date")
        return normalized

    @field_validator("worker_names", "mechanical_names", mode="before")
    @classmethod
    def join_names(cls, v):
        # Stored as free text; lists and comma-packed entries collapse to one clean string
        if v is None:
            return ""
        if isinstance(v, str) and not v.strip().startswith("["):
            return ", ".join(split_names(v))
        return ", ".join(split_names(parse_json_list(v)))

    @field_validator("items", mode="before")
    @classmethod
    def parse_items(cls, v):
        return v if isinstance(v, list) else parse_json_list(v)


class TallyReportSave(TallyReportBase):
    """Inspector save. ``id``/``created_at`` are assigned for new reports."""
    id: Optional[str] = None
    created_at: Optional[int] = None
    created_by: Optional[str] = None
    is_draft: bool = False


class TallyReportRecord(TallyReportBase):
    """Raw record for the replace-all path."""
    id: str
    status: TallyStatus = TallyStatus.NHAP
    created_at: int
    created_by: Optional[str] = None


class TallyReportResponse(TallyReportRecord):
    pass


class AddTallyItem(BaseModel):
    container_id: str
    actual_units: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class ApproveRequest(BaseModel):
    report_ids: List[str] = Field(..., min_length=1)


class GroupContainer(BaseModel):
    cont_id: Optional[str] = None
    cont_no: str
    seal_no: Optional[str] = None
    size: str = ""
    unit_type: str = ""
    tk_nha_vc: str = ""
    tk_dnl_ola: str = ""
    actual_units: int = 0
    actual_weight: float = 0.0
    is_scratched_floor: bool = False
    torn_units: int = 0
    notes: Optional[str] = None


class TallyGroupResponse(BaseModel):
    id: str
    report_no: str
    vessel_id: str
    vessel_name: str
    voyage_no: str
    mode: str
    shift: str
    day: str
    month: str
    year: str
    consignee: str
    commodity: str
    equipment: str
    worker_names: str
    created_by: Optional[str] = None
    created_at: int
    is_approved: bool
    containers: List[GroupContainer]
    total_units: int
    total_weight: float
