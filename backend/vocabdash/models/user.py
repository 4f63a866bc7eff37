from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
import uuid

from vocabdash.clock import utcnow


class UserBase(SQLModel):
    """Base user model with shared fields."""
    email: str = Field(unique=True, index=True)
    display_name: Optional[str] = None


class User(UserBase, table=True):
    """Account that owns a private word list and quiz history."""
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utcnow)
    is_active: bool = Field(default=True)


class UserCreate(SQLModel):
    email: str
    password: str
    display_name: Optional[str] = None


class UserResponse(SQLModel):
    """Public view of a user (no password hash)."""
    id: str
    email: str
    display_name: Optional[str]
    created_at: datetime
    is_active: bool


class RefreshToken(SQLModel, table=True):
    """Stored hash of an issued refresh token; rotated on every refresh."""
    __tablename__ = "refresh_tokens"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utcnow)
    revoked: bool = Field(default=False)


class LoginRequest(SQLModel):
    email: str
    password: str


class TokenResponse(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires


class RefreshRequest(SQLModel):
    refresh_token: str
