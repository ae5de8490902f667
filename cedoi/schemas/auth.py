"""Authentication schemas."""
from pydantic import Field, field_validator

from cedoi.core.sanitization import normalize_email, validate_otp_format
from cedoi.schemas.common import CamelModel
from cedoi.schemas.user import User


class SendOtpRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=254)

    @field_validator('email')
    @classmethod
    def normalize_email_field(cls, v: str) -> str:
        return normalize_email(v)


class VerifyOtpRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=254)
    otp: str = Field(..., min_length=4, max_length=10)

    @field_validator('email')
    @classmethod
    def normalize_email_field(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('otp')
    @classmethod
    def validate_otp_field(cls, v: str) -> str:
        return validate_otp_format(v)


class AuthResponse(CamelModel):
    user: User
