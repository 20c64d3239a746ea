"""
โมเดลสำหรับการยืนยันตัวตน (token และคำขอ login/register)
"""

from __future__ import annotations
from pydantic import BaseModel, Field, field_validator


class Token(BaseModel):
    """Bearer credential returned by /register and /token"""
    model_config = {"extra": "allow"}

    access_token: str = Field(..., min_length=1, description="Opaque bearer token")
    token_type: str = Field(default="bearer", description="Token type reported by the server")

    def __repr__(self) -> str:
        return f"Token(token_type={self.token_type!r}, access_token='***')"

    __str__ = __repr__


class AuthRequest(BaseModel):
    """Username/password pair for registration and login"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip()

    def to_form(self) -> dict:
        """OAuth2 password-flow form fields used by the /token endpoint"""
        return {"grant_type": "", "username": self.username, "password": self.password}
