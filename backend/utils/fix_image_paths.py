# utils/fix_image_paths.py
# Repairs warehouses whose image_path was stored as /uploads/warehouse-<...>
# instead of /uploads/warehouses/warehouse-<...> by older releases.
#
#   python -m utils.fix_image_paths        (run from backend/)
import logging
import os
import sys
from typing import List, Tuple

from sqlalchemy.orm import Session

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Settings
from database import init_db, make_engine, make_session_factory
from models.warehouse import Warehouse

logger = logging.getLogger(__name__)

LEGACY_PREFIX = "/uploads/warehouse-"
CURRENT_PREFIX = "/uploads/warehouses/"


def fix_image_paths(db: Session) -> List[Tuple[int, str, str]]:
    """Rewrite legacy image paths; returns (id, old, new) for each change."""
    broken = (
        db.query(Warehouse)
        .filter(Warehouse.image_path.like(f"{LEGACY_PREFIX}%"))
        .filter(~Warehouse.image_path.like(f"{CURRENT_PREFIX}%"))
        .order_by(Warehouse.id)
        .all()
    )

    changes = []
    for warehouse in broken:
        old = warehouse.image_path
        new = old.replace("/uploads/", CURRENT_PREFIX, 1)
        warehouse.image_path = new
        changes.append((warehouse.id, old, new))

    db.commit()
    return changes


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = Settings()
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)
    db = make_session_factory(engine)()
    try:
        changes = fix_image_paths(db)
        logger.info("Found %d warehouses with legacy image paths", len(changes))
        for warehouse_id, old, new in changes:
            logger.info("Warehouse %s: %s -> %s", warehouse_id, old, new)
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()
