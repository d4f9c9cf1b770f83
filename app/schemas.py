# schemas.py
# Defines the Pydantic models (schemas) for data validation and serialization.

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.core.hashing import MAX_PASSWORD_BYTES, password_too_long


# --- User Schemas ---
class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)


class PasswordField(BaseModel):
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserCreate(PasswordField, UserBase):
    model_config = ConfigDict(extra="forbid")


class UserLogin(PasswordField):
    username: str


class User(UserBase):
    """
    Public profile. Never carries the password hash.
    """
    id: UUID
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# --- Recipe Schemas ---
class RecipeBase(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None


class RecipeCreate(RecipeBase):
    ingredients: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RecipeUpdate(RecipeBase):
    """
    Partial update. Only the fields present in the request body are applied.
    """
    ingredients: Optional[List[str]] = None

    model_config = ConfigDict(extra="forbid")


class Recipe(RecipeBase):
    id: UUID
    ingredients: List[str] = []
    owner_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Response Schemas ---
class Message(BaseModel):
    message: str


class Created(Message):
    id: UUID


class LoginToken(BaseModel):
    token: str


class Token(BaseModel):
    access_token: str
    token_type: str


class ErrorResponse(BaseModel):
    error: str
    message: str
