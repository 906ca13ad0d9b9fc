# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.work_order import WorkOrderType, WorkOrderStatus
from schemas.validators import coerce_names, parse_json_list


class WorkOrderItem(BaseModel):
    method: str = "N/A"
    cargo_type: str = "Giấy"
    specs: str = ""
    volume: str = ""
    weight: str = ""
    extra_labor: int = 0
    notes: str = ""

    @field_validator("volume", "weight", mode="before")
    @classmethod
    def stringify(cls, v):
        return "" if v is None else str(v)


class WorkOrderRecord(BaseModel):
    id: str = Field(..., min_length=1)
    type: WorkOrderType
    vessel_id: str
    container_ids: List[str] = Field(default_factory=list)
    container_nos: List[str] = Field(default_factory=list)
    team_name: str = ""
    worker_names: List[str] = Field(default_factory=list)
    people_count: int = Field(0, ge=0)
    vehicle_type: Optional[str] = None
    vehicle_nos: List[str] = Field(default_factory=list)
    shift: str = "1"
    date: str = Field(..., description="DD/MM/YYYY")
    items: List[WorkOrderItem] = Field(default_factory=list)
    status: WorkOrderStatus = WorkOrderStatus.SUBMITTED
    is_holiday: bool = False
    is_weekend: bool = False
    created_by: Optional[str] = None
    tally_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("worker_names", "vehicle_nos", mode="before")
    @classmethod
    def flatten_names(cls, v):
        return coerce_names(v)

    @field_validator("container_ids", "container_nos", "items", mode="before")
    @classmethod
    def parse_lists(cls, v):
        return v if isinstance(v, list) else parse_json_list(v)

    @field_validator("team_name", mode="before")
    @classmethod
    def blank_team(cls, v):
        return (v or "").strip()


class WorkOrderResponse(WorkOrderRecord):
    day_type: str = "NORMAL"

    @field_validator("day_type", mode="before")
    @classmethod
    def day_type_value(cls, v):
        return v.value if hasattr(v, "value") else v
