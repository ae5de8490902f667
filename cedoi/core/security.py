"""Security and authentication utilities."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
import argon2
import jwt
from fastapi import HTTPException, Request

from cedoi.core import config
from cedoi.core.constants import SESSION_COOKIE_NAME

# Argon2 hasher for one-time passwords
ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


def generate_otp(length: Optional[int] = None) -> str:
    """Generate a numeric one-time password of the configured length."""
    length = length or config.settings.OTP_LENGTH
    return "".join(secrets.choice("0123456789") for _ in range(length))


def get_password_hash(password: str) -> str:
    """Hash a secret (OTP) using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a secret against its Argon2 hash."""
    try:
        ph.verify(password_hash, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)
    return encoded_jwt


def create_session_token(user_id, role: str) -> str:
    """Session token for a verified user; the id is stored as a string claim."""
    return create_access_token({"sub": str(user_id), "role": role})


def get_session_token(request: Request) -> Optional[str]:
    """Read the session token from the cookie or an Authorization bearer header."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def decode_session_token(token: str) -> dict:
    """Decode and validate a session token, raising 401 on any failure."""
    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid session")

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid session")
    return payload
