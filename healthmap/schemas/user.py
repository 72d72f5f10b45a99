from typing import Optional
from pydantic import BaseModel, ConfigDict
from datetime import datetime

class RegisterRequest(BaseModel):
    # Presence is checked by the handler so each missing field maps to a 400 message
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class UserCreate(BaseModel):
    email: str
    password: str
    name: Optional[str] = None

class ProfileBase(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    height: Optional[int] = None
    weight: Optional[int] = None
    activity_level: Optional[str] = None
    medical_conditions: Optional[str] = None
    allergies: Optional[str] = None
    medications: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

class ProfileCreate(ProfileBase):
    pass

class User(BaseModel):
    """Public view of a user; the password hash is never part of it."""
    id: str
    email: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class RegisterResponse(BaseModel):
    message: str
    user: User

class ErrorResponse(BaseModel):
    error: str
