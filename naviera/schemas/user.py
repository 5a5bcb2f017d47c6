from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from naviera.enums.user_role import UserRole, OperatorStatus


class UserBase(BaseModel):
    name: str
    last_name: str
    username: str
    email: EmailStr


class UserResponse(UserBase):
    id: int
    role: UserRole
    is_active: bool = True
    operator_status: Optional[OperatorStatus] = None
    assigned_vessel_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
