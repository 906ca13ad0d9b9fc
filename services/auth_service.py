# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from fastapi import HTTPException, status
import os
from dotenv import load_dotenv
import bcrypt

from models.user import User
from schemas.user import UserUpsert

load_dotenv()

log = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY", "SUPER_SECRET_TALLY_KEY_2026")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))


class AuthService:
    """Service layer for authentication and user management."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify plain password against hashed password."""
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a plain password."""
        salt = bcrypt.gensalt(rounds=12)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> dict:
        """Verify JWT token and return payload."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            raise credentials_exception
        if payload.get("sub") is None:
            raise credentials_exception
        return payload

    @staticmethod
    def authenticate_user(username: str, password: str, db: Session) -> User:
        """401 for unknown user or wrong password, 403 for a deactivated account."""
        user = db.query(User).filter(User.username == username.strip()).first()  # type: ignore

        if not user or not AuthService.verify_password(password, str(user.hashed_password)):
            log.warning("Failed login for %s", username)
            raise HTTPException(status_code=401, detail="Incorrect username or password")

        if not user.is_active:
            raise HTTPException(status_code=403, detail="Account is deactivated")
        return user

    @staticmethod
    def get_user_from_token(token: str, db: Session) -> User:
        """Get user from JWT token."""
        payload = AuthService.verify_token(token)
        username = str(payload.get("sub"))

        user = db.query(User).filter(User.username == username).first()  # type: ignore
        if user is None:
            raise HTTPException(status_code=401, detail="User not found")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="Account is deactivated")
        return user

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.username).all()

    @staticmethod
    def upsert_user(user_in: UserUpsert, db: Session) -> User:
        """Create or update by id. The password is re-hashed only when one is supplied."""
        user = db.query(User).filter(User.id == user_in.id).first() if user_in.id else None

        clash = db.query(User).filter(User.username == user_in.username).first()  # type: ignore
        if clash and (user is None or clash.id != user.id):
            raise HTTPException(status_code=400, detail="Username already exists.")

        if user is None:
            if not user_in.password:
                raise HTTPException(status_code=400, detail="Password is required for new users.")
            user = User(hashed_password=AuthService.get_password_hash(user_in.password))
            if user_in.id:
                user.id = user_in.id  # type: ignore
            db.add(user)
        elif user_in.password:
            user.hashed_password = AuthService.get_password_hash(user_in.password)  # type: ignore

        for key, value in user_in.model_dump(exclude={"id", "password"}).items():
            setattr(user, key, value)

        db.commit()
        db.refresh(user)
        log.info("Saved user %s (%s)", user.username, user.role)
        return user

    @staticmethod
    def delete_user(user_id: str, db: Session) -> None:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        db.delete(user)
        db.commit()
        log.info("Deleted user %s", user.username)
