# backend/auth/schemas.py

from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class RegisterSchema(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Literal["primary", "spouse"] = "primary"


class LoginSchema(BaseModel):
    email: EmailStr
    password: str
