# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResourceRecord(BaseModel):
    """Worker or team entry. Names are unique per collection, case-insensitively."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    department: str = "Kho"

    model_config = ConfigDict(from_attributes=True)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ResourceResponse(ResourceRecord):
    id: str
