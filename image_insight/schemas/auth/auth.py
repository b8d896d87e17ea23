# image_insight/schemas/auth/auth.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class SignupRequest(BaseModel):
    # Presence and format are checked by AuthService so errors read like the rest of the API
    email: Optional[str] = Field(None, description="Account email address")
    password: Optional[str] = Field(None, description="Plain-text password, at least 6 characters")

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserResponse(BaseModel):
    id: str
    email: str
    createdAt: Optional[datetime] = None

class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse

class MeResponse(BaseModel):
    success: bool = True
    user: UserResponse
