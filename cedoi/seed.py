"""Default forum roster and the seeding command.

Usage:
    python -m cedoi.seed            # add the default roster to an empty store
    python -m cedoi.seed --replace  # make the store's users match the roster exactly
"""
import argparse
from typing import List

from cedoi.core.config import settings
from cedoi.core.enums import Role
from cedoi.core.logging_config import get_logger, setup_logging
from cedoi.schemas import User, UserCreate
from cedoi.storage import AttendanceStore, build_store

logger = get_logger(__name__)

DEFAULT_MEMBERS = [
    UserCreate(email="sonai@cedoi.com", name="Sonai", company="CEDOI Administration",
               role=Role.SONAI, qr_code="sonai_qr_123"),
    UserCreate(email="chairman@cedoi.com", name="Chairman", company="CEDOI Board",
               role=Role.CHAIRMAN, qr_code="chairman_qr_456"),
    UserCreate(email="andrew.ananth@cedoi.com", name="Andrew Ananth", company="Godivatech",
               qr_code="andrew_qr_789"),
    UserCreate(email="dr.aafaq@cedoi.com", name="Dr Aafaq", company="zaara dentistry",
               qr_code="aafaq_qr_101"),
    UserCreate(email="vignesh.pavin@cedoi.com", name="Vignesh", company="Pavin caters",
               qr_code="vignesh_p_qr_102"),
    UserCreate(email="vignesh.aloka@cedoi.com", name="Vignesh", company="Aloka Events",
               qr_code="vignesh_a_qr_103"),
    UserCreate(email="imran@cedoi.com", name="Imran", company="MK Trading",
               qr_code="imran_qr_104"),
    UserCreate(email="radha.krishnan@cedoi.com", name="Radha Krishnan", company="Surya Crackers",
               qr_code="radha_qr_105"),
    UserCreate(email="mukesh@cedoi.com", name="Mukesh", company="Tamilnadu Electricals",
               qr_code="mukesh_qr_106"),
    UserCreate(email="shanmuga.pandiyan@cedoi.com", name="Shanmuga Pandiyan", company="Shree Mariamma Group",
               qr_code="shanmuga_qr_107"),
    UserCreate(email="muthukumar@cedoi.com", name="Muthukumar", company="PR Systems",
               qr_code="muthukumar_qr_108"),
    UserCreate(email="prabu@cedoi.com", name="Prabu", company="Cleaning solutions",
               qr_code="prabu_qr_109"),
    UserCreate(email="jaffer@cedoi.com", name="Jaffer", company="Spice King",
               qr_code="jaffer_qr_110"),
]


def seed_default_users(store: AttendanceStore) -> List[User]:
    """Add the default roster if the store has no users yet. Returns the users created."""
    if store.get_all_users():
        logger.info("seed_skipped", reason="store already has users")
        return []

    created = [store.create_user(member) for member in DEFAULT_MEMBERS]
    logger.info("seed_completed", users_created=len(created))
    return created


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the CEDOI forum roster")
    parser.add_argument(
        "--replace",
        action="store_true",
        help="replace the stored users with the default roster, removing anyone not on it",
    )
    args = parser.parse_args(argv)

    setup_logging(level=settings.LOG_LEVEL)
    store = build_store(settings)

    if args.replace:
        users = store.replace_users(DEFAULT_MEMBERS)
        logger.info("roster_replaced", users=len(users))
    else:
        seed_default_users(store)


if __name__ == "__main__":
    main()
