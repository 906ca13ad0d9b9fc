# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from sqlalchemy import Column, String
import uuid
from core.database import Base


def _resource_id() -> str:
    return uuid.uuid4().hex[:10]


class Worker(Base):
    """Labor crew member available for tally and work orders."""
    __tablename__ = "workers"

    id = Column(String(64), primary_key=True, default=_resource_id)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    department = Column(String, nullable=False, default="Kho")


class Team(Base):
    """Mechanical crew / operator team."""
    __tablename__ = "teams"

    id = Column(String(64), primary_key=True, default=_resource_id)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    department = Column(String, nullable=False, default="Kho")
