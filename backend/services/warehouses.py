# backend/services/warehouses.py
import logging
import re
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy import and_, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings
from models.position import WarehousePosition
from models.product import Product
from models.warehouse import Warehouse
from utils.errors import InvalidInput, NotFound
from utils.storage import path_to_url, remove_file, save_upload, url_to_path

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".svg"}
IMAGE_MIME_PATTERN = re.compile(r"jpeg|jpg|png|gif|svg")


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput("Warehouse name is required")
    return name.strip()


def get_warehouse(db: Session, warehouse_id: int) -> Warehouse:
    warehouse = db.get(Warehouse, warehouse_id)
    if warehouse is None:
        raise NotFound("Warehouse not found")
    return warehouse


def list_warehouses(db: Session, product_id: Optional[int] = None) -> List:
    """All warehouses by id; with product_id each row also gets points_count."""
    if product_id is None:
        return db.query(Warehouse).order_by(Warehouse.id).all()

    rows = (
        db.query(Warehouse, WarehousePosition.positions)
        .outerjoin(
            WarehousePosition,
            and_(WarehousePosition.warehouse_id == Warehouse.id, WarehousePosition.product_id == product_id),
        )
        .order_by(Warehouse.id)
        .all()
    )
    result = []
    for warehouse, positions in rows:
        result.append({
            "id": warehouse.id,
            "name": warehouse.name,
            "image_path": warehouse.image_path,
            "created_at": warehouse.created_at,
            "updated_at": warehouse.updated_at,
            "points_count": len(positions or []),
        })
    return result


def create_warehouse(db: Session, name, settings: Settings) -> Warehouse:
    warehouse = Warehouse(name=_clean_name(name), image_path=settings.PLACEHOLDER_IMAGE)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    return warehouse


def rename_warehouse(db: Session, warehouse_id: int, name) -> Warehouse:
    clean = _clean_name(name)
    warehouse = get_warehouse(db, warehouse_id)
    warehouse.name = clean
    db.commit()
    db.refresh(warehouse)
    return warehouse


def set_image_path(db: Session, warehouse_id: int, image_path) -> Warehouse:
    # Plain overwrite: no file is stored or removed here
    if not isinstance(image_path, str) or not image_path.strip():
        raise InvalidInput("Invalid image_path")
    warehouse = get_warehouse(db, warehouse_id)
    warehouse.image_path = image_path.strip()
    db.commit()
    db.refresh(warehouse)
    return warehouse


def _remove_stored_image(image_path: Optional[str], settings: Settings) -> None:
    if not image_path or image_path == settings.PLACEHOLDER_IMAGE:
        return
    path = url_to_path(settings.upload_root, image_path)
    if path is not None:
        remove_file(path)


def delete_warehouse(db: Session, warehouse_id: int, settings: Settings) -> None:
    """Delete the warehouse, its position-sets and its uploaded floor plan."""
    warehouse = get_warehouse(db, warehouse_id)
    image_path = warehouse.image_path
    try:
        db.query(WarehousePosition).filter(WarehousePosition.warehouse_id == warehouse_id).delete(synchronize_session=False)
        db.delete(warehouse)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    _remove_stored_image(image_path, settings)


# =========================
# FLOOR-PLAN IMAGE
# =========================
def _check_image(upload: Optional[UploadFile]) -> str:
    if upload is None or not upload.filename:
        raise InvalidInput("No image file provided")
    ext = Path(upload.filename).suffix.lower()
    if ext not in IMAGE_EXTENSIONS or not IMAGE_MIME_PATTERN.search((upload.content_type or "").lower()):
        raise InvalidInput("Only image files are allowed")
    return ext


def upload_image(db: Session, warehouse_id: int, upload: Optional[UploadFile], settings: Settings) -> str:
    """
    Store a new floor plan and point the warehouse at it.

    The previous image is removed from disk after the new path is committed,
    unless it is the shared placeholder. Returns the new public image path.
    """
    ext = _check_image(upload)
    warehouse = get_warehouse(db, warehouse_id)

    target = settings.warehouse_image_dir / f"warehouse-{warehouse_id}-{uuid.uuid4().hex}{ext}"
    save_upload(upload, target, settings.MAX_IMAGE_BYTES)
    image_path = path_to_url(settings.upload_root, target)

    old_path = warehouse.image_path
    try:
        warehouse.image_path = image_path
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        remove_file(target)
        raise

    if old_path != image_path:
        _remove_stored_image(old_path, settings)
    logger.info("Warehouse %s image replaced: %s -> %s", warehouse_id, old_path, image_path)
    return image_path


# =========================
# POSITIONS
# =========================
def get_positions(db: Session, warehouse_id: int, product_id: int) -> List[Dict]:
    row = (
        db.query(WarehousePosition)
        .filter(WarehousePosition.warehouse_id == warehouse_id, WarehousePosition.product_id == product_id)
        .first()
    )
    if row is None:
        return []
    return row.positions or []


def _dialect_insert(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Unsupported database dialect for positions upsert: {dialect}")


def save_positions(db: Session, warehouse_id: int, product_id, positions) -> List[Dict]:
    """
    Replace the whole position-set of one (warehouse, product) pair.

    A single INSERT ... ON CONFLICT statement, so the pair never gets a second
    row. Concurrent savers are not serialized: the last write wins.
    """
    if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id <= 0:
        raise InvalidInput("Invalid productId")
    if not isinstance(positions, list):
        raise InvalidInput("positions must be an array")

    get_warehouse(db, warehouse_id)
    if db.get(Product, product_id) is None:
        raise NotFound("Product not found")

    insert = _dialect_insert(db)
    stmt = insert(WarehousePosition.__table__).values(
        warehouse_id=warehouse_id,
        product_id=product_id,
        positions=positions,
        updated_at=func.now(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["warehouse_id", "product_id"],
        set_={"positions": stmt.excluded.positions, "updated_at": func.now()},
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Saved %d positions for product %s in warehouse %s", len(positions), product_id, warehouse_id)
    return positions
