"""
Work order model: dispatch instruction for a labor or mechanical crew,
usually derived from a tally report.
"""
# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from enum import Enum as PyEnum

from sqlalchemy import Column, String, Integer, Boolean, JSON, Enum

from core.database import Base


class WorkOrderType(PyEnum):
    LABOR = "LABOR"
    MECHANICAL = "MECHANICAL"


class WorkOrderStatus(PyEnum):
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DayType(PyEnum):
    NORMAL = "NORMAL"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(String(64), primary_key=True)
    type = Column(Enum(WorkOrderType, native_enum=False), nullable=False)
    vessel_id = Column(String(64), nullable=False, index=True)

    # Parallel arrays
    container_ids = Column(JSON, nullable=False, default=list)
    container_nos = Column(JSON, nullable=False, default=list)

    team_name = Column(String, nullable=False, default="")
    worker_names = Column(JSON, nullable=False, default=list)
    people_count = Column(Integer, nullable=False, default=0)
    vehicle_type = Column(String, nullable=True)
    vehicle_nos = Column(JSON, nullable=False, default=list)

    shift = Column(String(10), nullable=False, default="1")
    date = Column(String(10), nullable=False, doc="Display date DD/MM/YYYY")
    items = Column(JSON, nullable=False, default=list)
    status = Column(Enum(WorkOrderStatus, native_enum=False), nullable=False, default=WorkOrderStatus.SUBMITTED)

    is_holiday = Column(Boolean, nullable=False, default=False)
    is_weekend = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, nullable=True)
    tally_id = Column(String(64), nullable=True, index=True, doc="Originating tally report")

    @property
    def day_type(self) -> DayType:
        # Holiday wins over weekend when both flags are set
        if self.is_holiday:
            return DayType.HOLIDAY
        if self.is_weekend:
            return DayType.WEEKEND
        return DayType.NORMAL
