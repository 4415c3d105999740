# File: app/schemas/user.py

from datetime import datetime

from pydantic import BaseModel, field_validator, validate_email


class UserCreate(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_syntax(cls, v: str) -> str:
        # Syntax check only; the address is stored exactly as typed
        validate_email(v)
        return v


class UserLogin(BaseModel):
    # No syntax check: a malformed email is just one that matches no user
    email: str
    password: str


class UserRead(BaseModel):
    # Plain str: whatever was stored is echoed back untouched
    id: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class AuthResponse(BaseModel):
    token: str
    user: UserRead
