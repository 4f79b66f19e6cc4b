# backend/routes/admin.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User
from schemas.user import UserCreate, UserResponse
from services import users as user_service
from utils.audit import client_ip, write_log
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/users", tags=["Admin"])


# Retrieve all accounts, newest first (Admin only)
@router.get("", response_model=List[UserResponse])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return user_service.list_users(db)


# Create an account (Admin only)
@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin),
):
    user = user_service.create_user(db, payload.username, payload.password, payload.role, settings)
    write_log(db, user_id=current_user.id, action="USER_CREATE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user.id, "username": user.username, "role": user.role})
    return user


# Delete a user account (Admin only, never your own)
@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    username = user_service.delete_user(db, user_id, current_user.id)
    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": user_id, "username": username})
    return {"message": f"User {username} has been deleted"}
