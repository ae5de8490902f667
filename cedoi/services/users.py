"""User business logic."""
import io
from typing import List

import qrcode
from qrcode.image.svg import SvgImage

from cedoi.core.exceptions import NotFoundError
from cedoi.core.logging_config import get_logger
from cedoi.schemas import EntityId, User, UserCreate
from cedoi.storage import AttendanceStore

logger = get_logger(__name__)


def create_user(store: AttendanceStore, data: UserCreate) -> User:
    user = store.create_user(data)
    logger.info("user_created", user_id=user.id, role=user.role.value)
    return user


def list_users(store: AttendanceStore) -> List[User]:
    return store.get_all_users()


def generate_qr_code(data: str) -> bytes:
    """Render a QR code for `data` as an SVG document."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(image_factory=SvgImage)
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


def get_user_qr_code(store: AttendanceStore, user_id: EntityId) -> bytes:
    """SVG of the member's attendance QR code (the code organizers scan)."""
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not user.qr_code:
        raise NotFoundError("User has no QR code")
    return generate_qr_code(user.qr_code)
