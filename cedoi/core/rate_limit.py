"""Rate limiting configuration."""
import os
from slowapi import Limiter
from slowapi.util import get_remote_address


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    # Check X-Forwarded-For header (from reverse proxies)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    # Fall back to direct connection IP
    return get_remote_address(request)


# Uses Redis if REDIS_URL is set, falls back to memory for a single instance
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["300/minute"],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window"
)

# Rate limit definitions for different endpoint categories
# Organizers mark a whole forum (~50 members) from one phone in a few minutes
RATE_LIMITS = {
    "send_otp": "5/minute",
    "verify_otp": "10/minute",
    "attendance_write": "120/minute",
    "qr_scan": "120/minute",
}
