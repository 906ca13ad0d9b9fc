# Software Engineer: Kyeshav Chettiar
# Company FXO - Adcorp
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations
# v3.0.0.0

import logging
import os
from typing import Optional

from fastapi import FastAPI, Depends
from sqlalchemy.orm import Session

from core.database import engine, get_db, Base
from core.security import get_current_user
from schemas.statistics import DashboardResponse
from services.container_service import ContainerService
from services.detention_service import dashboard_stats

# Import all models to register them
from models.user import User
from models.vessel import Vessel
from models.container import Container
from models.resource import Worker, Team
from models.tally_report import TallyReport
from models.work_order import WorkOrder

# Import routers
from api import auth, users, resources, vessels, containers, tally_reports, work_orders, statistics, config

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="Port Tally Tracker",
    description="Container plans, tally reports and crew production for port warehouse operations",
    version="3.0.0"
)

log = logging.getLogger(__name__)

# Register routers
app.include_router(auth.router)
app.include_router(users.router, prefix="/api")
app.include_router(resources.router, prefix="/api")
app.include_router(vessels.router, prefix="/api")
app.include_router(containers.router, prefix="/api")
app.include_router(tally_reports.router, prefix="/api")
app.include_router(work_orders.router, prefix="/api")
app.include_router(statistics.router, prefix="/api")
app.include_router(config.router, prefix="/api")


# ==================== HEALTH CHECK ====================
@app.get("/health")
def health_check():
    """Health check endpoint for Docker and Kubernetes."""
    return {
        "status": "healthy",
        "service": "Port Tally Tracker",
        "version": "3.0.0"
    }


# ==================== API: DASHBOARD ====================
@app.get("/api/dashboard", response_model=DashboardResponse)
def api_dashboard(
    vessel_id: Optional[str] = None,
    consignee: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """Container counts for the operational dashboard."""
    return dashboard_stats(ContainerService.list_containers(db, vessel_id, consignee))
