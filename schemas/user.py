# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 


from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

ROLES = ("ADMIN", "CS", "INSPECTOR")


class UserUpsert(BaseModel):
    id: Optional[str] = None
    username: str = Field(..., min_length=3)
    name: str = ""
    password: Optional[str] = Field(None, min_length=6)  # required when creating
    role: str = "INSPECTOR"
    is_active: bool = True
    phone_number: Optional[str] = None
    department: str = "Kho"

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()

    @field_validator("role")
    @classmethod
    def check_role(cls, v: str) -> str:
        role = str(v).strip().upper()
        if role not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")
        return role


class UserResponse(BaseModel):
    id: str
    username: str
    name: str
    role: str
    is_active: bool
    phone_number: Optional[str] = None
    department: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)
