from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

class UserSummary(BaseModel):
    """Author/actor block embedded in posts, comments and reactions"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v

class User(BaseModel):
    """User model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: EmailStr
    is_active: bool
    has_profile_photo: bool = False
    created_at: datetime
    updated_at: datetime

class PublicUser(BaseModel):
    """Another user's profile, without contact details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    has_profile_photo: bool = False
    created_at: datetime
