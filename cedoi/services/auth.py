"""One-time password sign-in."""
from typing import Optional

from cedoi.core.cache import TTLCache
from cedoi.core.config import Settings
from cedoi.core.exceptions import NotFoundError
from cedoi.core.logging_config import get_logger
from cedoi.core.security import generate_otp, get_password_hash, verify_password
from cedoi.schemas import User
from cedoi.storage import AttendanceStore

logger = get_logger(__name__)

OTP_SENT_MESSAGE = "If the email is registered, a one-time password has been sent"


class OtpManager:
    """
    Issues and checks one-time passwords.

    Codes are kept only as Argon2 hashes, expire after OTP_EXPIRE_MINUTES and
    are consumed by the first successful verification. Delivery (email/SMS)
    is external; outside production the code is logged for development.
    """

    def __init__(self, settings: Settings, cache: Optional[TTLCache] = None):
        self._settings = settings
        self._cache = cache if cache is not None else TTLCache()

    @property
    def ttl_seconds(self) -> float:
        return self._settings.OTP_EXPIRE_MINUTES * 60

    def send_otp(self, store: AttendanceStore, email: str) -> Optional[str]:
        """
        Issue a code for a registered email.

        Unknown emails get the same response as known ones so the endpoint
        does not reveal who is registered.

        Returns:
            The plaintext code (for the delivery channel), or None for unknown emails
        """
        user = store.get_user_by_email(email)
        if user is None:
            logger.info("otp_requested_unknown_email")
            return None

        otp = generate_otp(self._settings.OTP_LENGTH)
        self._cache.set(email, get_password_hash(otp), ttl_seconds=self.ttl_seconds)

        if self._settings.ENVIRONMENT == "production":
            logger.info("otp_issued", user_id=user.id)
        else:
            logger.info("otp_issued", user_id=user.id, otp=otp)
        return otp

    def verify_otp(self, store: AttendanceStore, email: str, otp: str) -> Optional[User]:
        """
        Check a code and consume it on success.

        Returns:
            The signed-in user, or None if the code is wrong or expired

        Raises:
            NotFoundError: the email is not registered
        """
        user = store.get_user_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        otp_hash = self._cache.get(email)
        if otp_hash is None or not verify_password(otp, otp_hash):
            logger.info("otp_rejected", user_id=user.id)
            return None

        self._cache.invalidate(email)
        logger.info("otp_verified", user_id=user.id)
        return user
