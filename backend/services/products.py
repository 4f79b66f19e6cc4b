# backend/services/products.py
"""
Product catalog operations.

Listing, lookup, creation, batch deletion and the spreadsheet reconciliation
import. Deleting a product always removes its position-sets first.
"""
import logging
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings
from models.position import WarehousePosition
from models.product import Product
from models.warehouse import Warehouse
from utils.errors import InvalidInput, NotFound
from utils.spreadsheet import SPREADSHEET_EXTENSIONS, is_spreadsheet, read_product_names
from utils.storage import remove_file, save_upload

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30
MAX_PAGE_SIZE = 200
POSITION_FILTERS = ("all", "with", "without")


def _as_dict(product: Product) -> Dict:
    return {"id": product.id, "name": product.name}


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput("Product name is required")
    return name.strip()


def list_products(
    db: Session,
    q: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    positions: str = "all",
) -> Dict:
    """Page through the catalog ordered by id.

    positions="with" keeps products that have at least one position-set,
    "without" keeps the rest. page is clamped to >= 1 and limit to [1, 200].
    """
    if positions not in POSITION_FILTERS:
        raise InvalidInput("positions must be one of: all, with, without")

    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    offset = (page - 1) * limit

    query = db.query(Product)
    if q and q.strip():
        query = query.filter(Product.name.ilike(f"%{q.strip()}%"))

    if positions == "with":
        query = query.join(WarehousePosition, WarehousePosition.product_id == Product.id).distinct()
    elif positions == "without":
        query = query.outerjoin(WarehousePosition, WarehousePosition.product_id == Product.id)
        query = query.filter(WarehousePosition.id.is_(None))

    total = query.count()
    items = query.order_by(Product.id.asc()).offset(offset).limit(limit).all()

    return {
        "items": items,
        "page": page,
        "limit": limit,
        "total": total,
        "has_more": offset + len(items) < total,
    }


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def create_product(db: Session, name) -> Product:
    product = Product(name=_clean_name(name))
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def batch_delete(db: Session, product_ids: List[int]) -> List[Dict]:
    """Delete products and their position-sets. Unknown ids are skipped."""
    if not product_ids:
        raise InvalidInput("Product id list is required")
    if any(isinstance(i, bool) or not isinstance(i, int) or i <= 0 for i in product_ids):
        raise InvalidInput("Product ids must be positive integers")

    ids = sorted(set(product_ids))
    try:
        db.query(WarehousePosition).filter(WarehousePosition.product_id.in_(ids)).delete(synchronize_session=False)
        doomed = db.query(Product).filter(Product.id.in_(ids)).order_by(Product.id).all()
        deleted = [_as_dict(p) for p in doomed]
        db.query(Product).filter(Product.id.in_(ids)).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Batch deleted %d of %d requested products", len(deleted), len(ids))
    return deleted


def warehouses_for_product(db: Session, product_id: int) -> List[Dict]:
    """Warehouses where the product has a stored position-set, by warehouse id."""
    rows = (
        db.query(Warehouse.id, Warehouse.name, WarehousePosition.positions)
        .join(WarehousePosition, WarehousePosition.warehouse_id == Warehouse.id)
        .filter(WarehousePosition.product_id == product_id)
        .order_by(Warehouse.id)
        .all()
    )
    return [{"id": r.id, "name": r.name, "positions": r.positions or []} for r in rows]


def positions_summary(db: Session) -> Dict:
    total = db.query(func.count(Product.id)).scalar() or 0
    with_positions = (
        db.query(func.count(func.distinct(Product.id)))
        .select_from(Product)
        .join(WarehousePosition, WarehousePosition.product_id == Product.id)
        .scalar()
        or 0
    )
    return {
        "total": total,
        "with_positions": with_positions,
        "without_positions": max(total - with_positions, 0),
    }


# ==========================================
#  SPREADSHEET RECONCILIATION
# ==========================================
def reconcile_names(db: Session, names: List[str]) -> Dict:
    """
    Make the catalog match a list of names.

    Names missing from the catalog are created, catalog products whose name is
    absent from the list are deleted together with their position-sets.
    Matching is exact and case-sensitive. Every create and delete is committed
    on its own; a failing row is reported in "errors" and the rest continue.
    """
    if not names:
        raise InvalidInput("No product names found in the file")

    existing = db.query(Product).order_by(Product.id).all()
    existing_names = {p.name for p in existing}
    wanted = set(names)

    # A name repeated in the sheet is still created only once
    to_create = [n for n in dict.fromkeys(names) if n not in existing_names]
    to_delete = [_as_dict(p) for p in existing if p.name not in wanted]

    created: List[Dict] = []
    deleted: List[Dict] = []
    errors: List[str] = []

    for name in to_create:
        try:
            product = Product(name=name)
            db.add(product)
            db.commit()
            created.append(_as_dict(product))
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Import: could not create product %r: %s", name, e)
            errors.append(f'Could not create product "{name}"')

    for item in to_delete:
        try:
            db.query(WarehousePosition).filter(WarehousePosition.product_id == item["id"]).delete(synchronize_session=False)
            db.query(Product).filter(Product.id == item["id"]).delete(synchronize_session=False)
            db.commit()
            deleted.append(item)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Import: could not delete product %r: %s", item["name"], e)
            errors.append(f'Could not delete product "{item["name"]}"')

    return {
        "created_products": created,
        "deleted_products": deleted,
        "errors": errors,
        "total_in_excel": len(names),
        "total_in_database": len(existing),
    }


def import_products(db: Session, upload: Optional[UploadFile], settings: Settings) -> Dict:
    """Store the uploaded sheet in a temp file, reconcile, then drop the file."""
    if upload is None or not upload.filename:
        raise InvalidInput("Spreadsheet file is required")
    if not is_spreadsheet(upload.filename, upload.content_type):
        raise InvalidInput("Only Excel files (.xlsx, .xls) or CSV files are allowed")

    ext = Path(upload.filename).suffix.lower()
    if ext not in SPREADSHEET_EXTENSIONS:
        # Accepted on MIME type alone; pick the parser from it
        ext = ".csv" if "csv" in (upload.content_type or "") else ".xlsx"
    temp_path = settings.import_temp_dir / f"import-{uuid.uuid4().hex}{ext}"
    save_upload(upload, temp_path, settings.MAX_IMPORT_BYTES)
    try:
        names = read_product_names(temp_path)
        return reconcile_names(db, names)
    finally:
        remove_file(temp_path)
