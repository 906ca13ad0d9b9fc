"""
Container SQLAlchemy model: physical units (containers or flatbed vehicles)
discharged from a vessel and tracked through customs and tally.
"""
from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum as PyEnum

# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
import uuid

from core.database import Base


class UnitType(PyEnum):
    """A unit is either an ISO container or a vehicle (trailer / flatbed)."""
    CONTAINER = "CONTAINER"
    VEHICLE = "VEHICLE"


class ContainerStatus(PyEnum):
    """
    PENDING -> READY happens automatically once both customs declarations exist.
    COMPLETED is only reached through tally approval and is never reverted by imports.
    """
    PENDING = "PENDING"
    READY = "READY"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


def new_container_id() -> str:
    return uuid.uuid4().hex[:12]


class Container(Base):
    """
    One discharge unit of a vessel.

    Identity inside a vessel is ``(container_no, plan_date)``: the same
    container number may be re-planned on another day and must not collide.
    """
    __tablename__ = "containers"

    __table_args__ = (
        UniqueConstraint("vessel_id", "container_no", "plan_date", name="uq_container_identity"),
    )

    id = Column(String(64), primary_key=True, default=new_container_id, doc="Opaque id, stable once assigned")
    vessel_id = Column(String(64), nullable=False, index=True, doc="Owning vessel")

    unit_type = Column(
        Enum(UnitType, native_enum=False),
        nullable=False,
        default=UnitType.CONTAINER,
        doc="CONTAINER or VEHICLE"
    )
    container_no = Column(String(50), nullable=False, index=True, doc="Container number or plate number")
    plan_date = Column(String(10), nullable=False, default="", doc="Planned handling date (YYYY-MM-DD)")
    size = Column(String(30), nullable=True)
    seal_no = Column(String(80), nullable=True)
    consignee = Column(String(200), nullable=True)
    carrier = Column(String(100), nullable=True)
    bill_no = Column(String(100), nullable=True)
    vendor = Column(String(100), nullable=True)

    # Cargo plan
    pkgs = Column(Integer, nullable=False, default=0, doc="Declared package count")
    weight = Column(Float, nullable=False, default=0.0, doc="Declared weight in tons")

    # Customs declarations (carrier declaration and DNL/OLA declaration)
    tk_nha_vc = Column(String(50), nullable=True)
    ngay_tk_nha_vc = Column(String(10), nullable=True)
    tk_dnl_ola = Column(String(50), nullable=True)
    ngay_tk_dnl = Column(String(10), nullable=True)

    det_expiry = Column(String(10), nullable=True, doc="Detention expiry (YYYY-MM-DD)")
    empty_return_place = Column(String(100), nullable=True)

    status = Column(
        Enum(ContainerStatus, native_enum=False),
        nullable=False,
        default=ContainerStatus.PENDING,
    )
    tally_approved = Column(Boolean, nullable=False, default=False)
    work_order_approved = Column(Boolean, nullable=False, default=False)
    remarks = Column(Text, nullable=True)
    worker_names = Column(JSON, nullable=False, default=list)

    last_urged_at = Column(DateTime(timezone=True), nullable=True, doc="Last time an inspector was urged")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def identity_key(self) -> str:
        return f"{self.container_no}_{self.plan_date}"

    def __repr__(self) -> str:
        status = self.status.value if hasattr(self.status, "value") else self.status
        return f"<Container(id={self.id}, container_no={self.container_no}, plan_date={self.plan_date}, status={status})>"
