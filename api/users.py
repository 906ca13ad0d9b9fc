# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_admin
from core.database import get_db
from models.user import User
from schemas.user import UserResponse, UserUpsert
from services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return AuthService.list_users(db)


@router.post("/", response_model=UserResponse)
def upsert_user(
    payload: UserUpsert,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a user, or update the one with the given id."""
    return AuthService.upsert_user(payload, db)


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    AuthService.delete_user(user_id, db)
    return {"success": True}
