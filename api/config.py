# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from fastapi import APIRouter, Depends

from api.dependencies import require_office, require_staff
from models.user import User
from schemas.config import DetentionConfigSchema
from services.config_service import get_detention_config, set_detention_config

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/detention", response_model=DetentionConfigSchema)
def read_detention_config(current_user: User = Depends(require_staff)):
    config = get_detention_config()
    return DetentionConfigSchema(urgent_days=config.urgent_days, warning_days=config.warning_days)


@router.put("/detention", response_model=DetentionConfigSchema)
def update_detention_config(
    payload: DetentionConfigSchema,
    current_user: User = Depends(require_office)
):
    """Change the DET alert thresholds for every subsequent classification."""
    config = set_detention_config(payload.urgent_days, payload.warning_days)
    return DetentionConfigSchema(urgent_days=config.urgent_days, warning_days=config.warning_days)
