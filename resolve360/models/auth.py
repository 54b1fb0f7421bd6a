# resolve360/models/auth.py
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

class Token(BaseModel):
    access_token: str
    token_type: str

class SignInRequest(BaseModel):
    """Identity asserted by the identity provider after sign-in"""
    uid: str = Field(..., min_length=1)
    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = None

class SessionOut(Token):
    role: str
    role_label: str
    role_changed: bool = False

class UserOut(BaseModel):
    user_id: str
    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: str
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

class UserActiveUpdate(BaseModel):
    is_active: bool
