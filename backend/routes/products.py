# backend/routes/products.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User
import schemas.product as product_schemas
from services import products as product_service
from utils.audit import client_ip, write_log
from utils.tokenJWT import require_admin

router = APIRouter(tags=["Products"])


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("/products", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Case-insensitive name substring"),
    page: int = Query(1),
    limit: int = Query(product_service.DEFAULT_PAGE_SIZE),
    positions: Literal["all", "with", "without"] = Query("all"),
    db: Session = Depends(get_db),
):
    # page and limit are clamped by the service rather than rejected
    return product_service.list_products(db, q=q, page=page, limit=limit, positions=positions)


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("/products", response_model=product_schemas.ProductOut, status_code=201)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = product_service.create_product(db, payload.name)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "name": product.name},
    )
    return product


# =========================
# MASOWE USUWANIE
# =========================
@router.delete("/products/batch", response_model=product_schemas.BatchDeleteResult)
def delete_products(
    payload: product_schemas.BatchDeleteRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    deleted = product_service.batch_delete(db, payload.product_ids)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_BATCH_DELETE", resource="products",
        status="SUCCESS", ip=client_ip(request),
        meta={"requested": payload.product_ids, "deleted": [p["id"] for p in deleted]},
    )
    return {"message": f"Deleted products: {len(deleted)}", "deleted_products": deleted}


# =========================
# IMPORT Z ARKUSZA
# =========================
@router.post(
    "/products/import",
    response_model=product_schemas.ImportResult,
    response_model_exclude_none=True,
)
def import_products(
    request: Request,
    excel_file: Optional[UploadFile] = File(None, alias="excelFile"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin),
):
    result = product_service.import_products(db, excel_file, settings)
    created, deleted = result["created_products"], result["deleted_products"]

    write_log(
        db, user_id=current_user.id, action="PRODUCT_IMPORT", resource="products",
        status="SUCCESS" if not result["errors"] else "PARTIAL", ip=client_ip(request),
        meta={"created": len(created), "deleted": len(deleted), "errors": len(result["errors"])},
    )
    return {
        "message": f"Import finished. Created products: {len(created)}, deleted products: {len(deleted)}",
        "created_products": created,
        "deleted_products": deleted,
        "errors": result["errors"] or None,
        "total_processed": result["total_in_excel"],
        "total_in_excel": result["total_in_excel"],
        "total_in_database": result["total_in_database"],
    }


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return product_service.get_product(db, product_id)


@router.get("/products/{product_id}/warehouses", response_model=product_schemas.ProductWarehouses)
def get_product_warehouses(product_id: int, db: Session = Depends(get_db)):
    return {
        "product_id": product_id,
        "warehouses": product_service.warehouses_for_product(db, product_id),
    }


# =========================
# ENDPOINTY POMOCNICZE
# =========================
@router.get("/debug/positions-summary", response_model=product_schemas.PositionsSummary)
def positions_summary(db: Session = Depends(get_db)):
    return product_service.positions_summary(db)
