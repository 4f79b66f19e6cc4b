from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Role = Literal["admin", "worker"]


# Schema for user authentication credentials
class UserLogin(BaseModel):
    username: str
    password: str


# Schema for account creation by an administrator
class UserCreate(BaseModel):
    username: str
    password: str
    role: Role = "worker"


# Identity carried by the token and returned to the client
class UserInfo(BaseModel):
    id: int
    username: str
    role: str

    model_config = ConfigDict(from_attributes=True)


# Output schema for the account list (never includes the password hash)
class UserResponse(UserInfo):
    created_at: Optional[datetime] = None


# Schema for JWT authentication token response
class Token(BaseModel):
    token: str
    user: UserInfo


class MeResponse(BaseModel):
    user: UserInfo
