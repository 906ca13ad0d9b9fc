# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from sqlalchemy import Column, String, Integer, Float
import uuid
from core.database import Base


class Vessel(Base):
    __tablename__ = "vessels"

    id = Column(String(64), primary_key=True, default=lambda: f"v_{uuid.uuid4().hex[:8]}")
    vessel_name = Column(String, nullable=False)
    voyage_no = Column(String, nullable=False, default="N/A")
    consignee = Column(String, nullable=True)
    commodity = Column(String, nullable=True)
    eta = Column(String(10), nullable=True)

    # Recomputed after every container import
    total_containers = Column(Integer, nullable=False, default=0)
    total_pkgs = Column(Integer, nullable=False, default=0)
    total_weight = Column(Float, nullable=False, default=0.0)

