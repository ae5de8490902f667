"""User schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from cedoi.core.enums import Role
from cedoi.core.sanitization import (
    MAX_COMPANY_LENGTH,
    MAX_NAME_LENGTH,
    normalize_email,
    sanitize_optional_text,
    validate_qr_code,
)
from cedoi.schemas.common import CamelModel, EntityId


class UserCreate(CamelModel):
    email: str = Field(..., max_length=254)
    name: Optional[str] = None
    company: Optional[str] = None
    role: Role = Role.MEMBER
    qr_code: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalize_email_field(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional_text(v, MAX_NAME_LENGTH)

    @field_validator('company')
    @classmethod
    def sanitize_company_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional_text(v, MAX_COMPANY_LENGTH)

    @field_validator('qr_code')
    @classmethod
    def validate_qr_code_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_qr_code(v)


class User(CamelModel):
    id: EntityId
    email: str
    name: Optional[str] = None
    company: Optional[str] = None
    role: Role
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
