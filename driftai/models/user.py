from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from uuid import uuid4
from datetime import datetime


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(min_length=1)
    company_name: Optional[str] = Field(default=None, alias="companyName")


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserInDB(BaseModel):
    user_id: str = Field(default_factory=lambda: str(uuid4()))
    email: EmailStr
    password_hash: str
    company_name: Optional[str] = None
    tripletex_token: Optional[str] = None
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class UserPublic(BaseModel):
    user_id: str
    email: EmailStr
    company_name: Optional[str] = None
    created_at: str = ""


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPublic
