# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User
from schemas import user as schemas
from services import users as user_service
from utils.audit import client_ip, write_log
from utils.errors import ServiceError
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user, token = user_service.authenticate(db, payload.username, payload.password, settings)
    except ServiceError:
        # Log failure before propagating the generic error
        write_log(db, user_id=None, action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"username": payload.username})
        raise

    write_log(db, user_id=user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"username": user.username})

    return {"token": token, "user": user}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.MeResponse)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
