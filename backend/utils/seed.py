# backend/utils/seed.py
import logging

from sqlalchemy.orm import Session

from config import Settings
from models.product import Product
from models.users import User
from models.warehouse import Warehouse
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

DEMO_WAREHOUSES = ["Main warehouse", "Reserve warehouse", "Regional warehouse"]
DEMO_PRODUCTS = ["iPhone 15", "MacBook Air", "AirPods Pro", "Apple Watch", "iPad Pro", "Magic Keyboard"]


def seed_db(db: Session, settings: Settings) -> None:
    """First-run data: the bootstrap admin, plus demo rows when enabled.

    Each table is only seeded while it is empty, so restarts are no-ops.
    """
    if db.query(User).count() == 0:
        db.add(User(
            username=settings.ADMIN_USERNAME,
            password_hash=get_password_hash(settings.ADMIN_PASSWORD, rounds=settings.BCRYPT_ROUNDS),
            role="admin",
        ))
        logger.warning("Created bootstrap admin account %r; change its password", settings.ADMIN_USERNAME)

    if settings.SEED_DEMO_DATA:
        if db.query(Warehouse).count() == 0:
            for name in DEMO_WAREHOUSES:
                db.add(Warehouse(name=name, image_path=settings.PLACEHOLDER_IMAGE))
            logger.info("Seeded %d demo warehouses", len(DEMO_WAREHOUSES))
        if db.query(Product).count() == 0:
            for name in DEMO_PRODUCTS:
                db.add(Product(name=name))
            logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
