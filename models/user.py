# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime
import uuid
from core.database import Base

class User(Base):
    __tablename__ = "users"
    
    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))  # type: ignore
    username = Column(String, unique=True, index=True, nullable=False)  # type: ignore
    name = Column(String, nullable=False, default="")  # type: ignore
    hashed_password = Column(String, nullable=False)  # type: ignore
    role = Column(String, default="INSPECTOR")  # type: ignore  # ADMIN, CS or INSPECTOR
    is_active = Column(Boolean, default=True)  # type: ignore
    phone_number = Column(String, nullable=True)  # type: ignore
    department = Column(String, default="Kho")  # type: ignore
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))  # type: ignore
