# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from typing import List

from pydantic import BaseModel


class WorkerStat(BaseModel):
    id: str
    name: str
    date: str
    shift: str
    method: str
    cargo_type: str
    normal_shifts: int
    weekend_shifts: int
    holiday_shifts: int


class MechanicalStat(BaseModel):
    id: str
    name: str
    vehicle_no: str
    date: str
    shift: str
    method: str
    cargo_type: str
    normal_weight: float
    weekend_weight: float
    holiday_weight: float


class WorkerStatsResponse(BaseModel):
    rows: List[WorkerStat]
    totals: dict


class MechanicalStatsResponse(BaseModel):
    rows: List[MechanicalStat]
    totals: dict


class DashboardResponse(BaseModel):
    total: int
    ready: int
    urgent_det: int
    completed: int
    in_progress: int
    pending: int
