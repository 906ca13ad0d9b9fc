"""
Tally report model: an inspector's count of goods actually received against
the declared container plan.
"""
# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from enum import Enum as PyEnum

from sqlalchemy import Column, String, Integer, BigInteger, Boolean, JSON, Enum

from core.database import Base


class TallyMode(PyEnum):
    NHAP = "NHAP"  # import
    XUAT = "XUAT"  # export


class TallyStatus(PyEnum):
    NHAP = "NHAP"              # draft
    CHUA_DUYET = "CHUA_DUYET"  # submitted, pending approval
    DA_DUYET = "DA_DUYET"      # approved


class TallyReport(Base):
    """
    Report numbers are not stored: they are derived from the ascending
    ``created_at`` order of the whole collection.
    """
    __tablename__ = "tally_reports"

    id = Column(String(64), primary_key=True)
    vessel_id = Column(String(64), nullable=False, index=True)
    mode = Column(Enum(TallyMode, native_enum=False), nullable=False, default=TallyMode.NHAP)
    shift = Column(String(10), nullable=False, default="1")
    work_date = Column(String(10), nullable=False, doc="Work date (YYYY-MM-DD)")
    owner = Column(String, nullable=True, doc="Cargo owner override for the printed report")

    worker_count = Column(Integer, nullable=False, default=0)
    worker_names = Column(String, nullable=False, default="", doc="Comma-joined labor crew names")
    mechanical_count = Column(Integer, nullable=False, default=0)
    mechanical_names = Column(String, nullable=False, default="")
    equipment = Column(String, nullable=True)
    vehicle_no = Column(String, nullable=True)
    vehicle_type = Column(String, nullable=True)
    ship_no = Column(String, nullable=True)

    items = Column(JSON, nullable=False, default=list)

    status = Column(Enum(TallyStatus, native_enum=False), nullable=False, default=TallyStatus.NHAP)
    created_at = Column(BigInteger, nullable=False, doc="Epoch milliseconds, defines numbering order")
    created_by = Column(String, nullable=True)
    is_holiday = Column(Boolean, nullable=True)
    is_weekend = Column(Boolean, nullable=True)

    @property
    def is_approved(self) -> bool:
        status = self.status.value if hasattr(self.status, "value") else str(self.status)
        return status == TallyStatus.DA_DUYET.value
