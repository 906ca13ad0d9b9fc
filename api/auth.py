# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import get_current_user
from models.user import User
from services.auth_service import AuthService
from schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login")
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Check username and password; returns the user and a bearer token."""
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)
    access_token = AuthService.create_access_token(
        data={"sub": user.username, "role": user.role}
    )

    response = JSONResponse(content={
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserResponse.model_validate(user).model_dump(),
    })

    response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=8*60*60,
        httponly=True,
        samesite="lax",
        secure=False  # Set to True if running over HTTPS in production
    )

    return response


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user profile."""
    return current_user
