"""Authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from cedoi.api.deps import get_current_user, get_otp_manager, get_settings, get_store
from cedoi.core.config import Settings
from cedoi.core.constants import SESSION_COOKIE_NAME
from cedoi.core.rate_limit import RATE_LIMITS, limiter
from cedoi.core.security import create_session_token
from cedoi.schemas import AuthResponse, MessageResponse, SendOtpRequest, SuccessResponse, User, VerifyOtpRequest
from cedoi.services.auth import OTP_SENT_MESSAGE, OtpManager
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.post("/send-otp", response_model=MessageResponse)
@limiter.limit(RATE_LIMITS["send_otp"])
async def send_otp(
    request: Request,
    body: SendOtpRequest,
    store: AttendanceStore = Depends(get_store),
    otp_manager: OtpManager = Depends(get_otp_manager),
) -> MessageResponse:
    """
    Issue a one-time password for the given email.

    The response is identical for registered and unregistered emails.

    Example:
        Request:
            POST /api/auth/send-otp
            {"email": "sonai@cedoi.com"}

        Response (200):
            {"message": "If the email is registered, a one-time password has been sent"}
    """
    otp_manager.send_otp(store, body.email)
    return MessageResponse(message=OTP_SENT_MESSAGE)


@router.post("/verify-otp", response_model=AuthResponse)
@limiter.limit(RATE_LIMITS["verify_otp"])
async def verify_otp(
    request: Request,
    body: VerifyOtpRequest,
    response: Response,
    store: AttendanceStore = Depends(get_store),
    otp_manager: OtpManager = Depends(get_otp_manager),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """
    Exchange a valid one-time password for a session.

    Sets the session JWT in an httpOnly cookie and returns the user.

    Raises:
        HTTPException: 401 if the code is wrong or expired
        NotFoundError: 404 if the email is not registered
    """
    user = otp_manager.verify_otp(store, body.email, body.otp)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired one-time password")

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user.id, user.role.value),
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return AuthResponse(user=user)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """Clear the session cookie. Safe to call when not signed in."""
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    return SuccessResponse(success=True, message="Logged out successfully")


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)) -> User:
    return user
