from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel, EmailStr, NonEmptyStr

MIN_PASSWORD_LENGTH = 6


class UserCreate(CamelModel):
    name: NonEmptyStr
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserLogin(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    user_id: str
    email: str
    token: str


class UserSummary(CamelModel):
    id: str
    name: str
    email: str


class UserRead(UserSummary):
    tasks: List[str] = []
    created_at: datetime


class UserProfile(CamelModel):
    name: str
    email: str
    created_tasks_count: int
    assigned_tasks_count: int
    total_tasks_count: int


class ProfileUpdate(CamelModel):
    name: NonEmptyStr
    email: EmailStr
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class ProfileUpdateResponse(UserProfile):
    token: str
