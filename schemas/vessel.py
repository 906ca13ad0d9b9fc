# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.date_service import normalize_date


class VesselRecord(BaseModel):
    id: Optional[str] = None
    vessel_name: str = Field(..., min_length=1)
    voyage_no: str = "N/A"
    consignee: Optional[str] = None
    commodity: Optional[str] = None
    eta: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("eta", mode="before")
    @classmethod
    def normalize_eta(cls, v):
        return normalize_date(v) if v is not None else v


class VesselResponse(VesselRecord):
    id: str
    total_containers: int = 0
    total_pkgs: int = 0
    total_weight: float = 0.0
