"""Input sanitization utilities."""
import re
from typing import Optional


# Maximum length constraints
MAX_NAME_LENGTH = 120
MAX_COMPANY_LENGTH = 160
MAX_VENUE_LENGTH = 200
MAX_AGENDA_LENGTH = 1000
MAX_QR_CODE_LENGTH = 200
MAX_EMAIL_LENGTH = 254

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize free text input.

    Strips HTML tags and normalizes whitespace but does NOT escape entities;
    the HTML report escapes on render.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_optional_text(text: Optional[str], max_length: int) -> Optional[str]:
    """Sanitize an optional display field; blank values become None."""
    if text is None:
        return None
    sanitized = sanitize_text(text, max_length=max_length)
    return sanitized or None


def normalize_email(email: str) -> str:
    """
    Normalize an email login key.

    Raises:
        ValueError: If the address is empty, too long or malformed
    """
    if not isinstance(email, str):
        raise ValueError("Email must be a string")

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("Email cannot be empty")
    if len(normalized) > MAX_EMAIL_LENGTH:
        raise ValueError(f"Email exceeds maximum length of {MAX_EMAIL_LENGTH} characters")
    if not _EMAIL_PATTERN.match(normalized):
        raise ValueError("Email address is invalid")
    return normalized


def validate_qr_code(qr_code: str) -> str:
    """
    Validate a scanned QR payload.

    Only surrounding whitespace is trimmed; matching is exact and case-sensitive.
    """
    if not isinstance(qr_code, str):
        raise ValueError("QR code must be a string")

    qr_code = qr_code.strip()
    if not qr_code:
        raise ValueError("QR code cannot be empty")
    if len(qr_code) > MAX_QR_CODE_LENGTH:
        raise ValueError(f"QR code exceeds maximum length of {MAX_QR_CODE_LENGTH} characters")
    return qr_code


def validate_otp_format(otp: str) -> str:
    """OTPs are short digit strings."""
    if not isinstance(otp, str):
        raise ValueError("OTP must be a string")

    otp = otp.strip()
    if not re.match(r'^[0-9]{4,10}$', otp):
        raise ValueError("OTP must be 4 to 10 digits")
    return otp
