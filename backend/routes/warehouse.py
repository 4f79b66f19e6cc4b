# backend/routes/warehouse.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User
from schemas.warehouse import (
    ImageUploaded, PositionsMap, PositionsSaved, PositionsUpdate,
    WarehouseCreate, WarehouseImagePath, WarehouseOut, WarehouseRename, WarehouseWithCount,
)
from services import warehouses as warehouse_service
from utils.audit import client_ip, write_log
from utils.tokenJWT import get_current_user, require_admin

router = APIRouter(prefix="/warehouses", tags=["Warehouse"])


# Two shapes: bare records, or records with points_count when productId is given
@router.get("")
def list_warehouses(
    product_id: Optional[int] = Query(None, alias="productId", gt=0),
    db: Session = Depends(get_db),
):
    rows = warehouse_service.list_warehouses(db, product_id)
    if product_id is None:
        return [WarehouseOut.model_validate(w) for w in rows]
    return [WarehouseWithCount.model_validate(r) for r in rows]


@router.get("/{warehouse_id}", response_model=WarehouseOut)
def get_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    return warehouse_service.get_warehouse(db, warehouse_id)


@router.post("", response_model=WarehouseOut, status_code=201)
def create_warehouse(
    payload: WarehouseCreate,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin),
):
    warehouse = warehouse_service.create_warehouse(db, payload.name, settings)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_CREATE", resource="warehouses",
              status="SUCCESS", ip=client_ip(request), meta={"id": warehouse.id, "name": warehouse.name})
    return warehouse


@router.put("/{warehouse_id}/name", response_model=WarehouseOut)
def rename_warehouse(
    warehouse_id: int,
    payload: WarehouseRename,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    warehouse = warehouse_service.rename_warehouse(db, warehouse_id, payload.name)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_RENAME", resource="warehouses",
              status="SUCCESS", ip=client_ip(request), meta={"id": warehouse.id, "name": warehouse.name})
    return warehouse


# Overwrite the stored image path without touching any file
@router.put("/{warehouse_id}", response_model=WarehouseOut)
def update_image_path(
    warehouse_id: int,
    payload: WarehouseImagePath,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    warehouse = warehouse_service.set_image_path(db, warehouse_id, payload.image_path)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_IMAGE_PATH", resource="warehouses",
              status="SUCCESS", ip=client_ip(request), meta={"id": warehouse.id, "image_path": warehouse.image_path})
    return warehouse


@router.delete("/{warehouse_id}")
def delete_warehouse(
    warehouse_id: int,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin),
):
    warehouse_service.delete_warehouse(db, warehouse_id, settings)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_DELETE", resource="warehouses",
              status="SUCCESS", ip=client_ip(request), meta={"id": warehouse_id})
    return {"message": "Warehouse deleted"}


@router.post("/{warehouse_id}/image", response_model=ImageUploaded)
def upload_image(
    warehouse_id: int,
    request: Request,
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin),
):
    image_path = warehouse_service.upload_image(db, warehouse_id, image, settings)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_IMAGE", resource="warehouses",
              status="SUCCESS", ip=client_ip(request), meta={"id": warehouse_id, "image_path": image_path})
    return {"message": "Image uploaded successfully", "image_path": image_path}


# =========================
# MAPA POZYCJI
# =========================
@router.get("/{warehouse_id}/map", response_model=PositionsMap)
def get_map(
    warehouse_id: int,
    product_id: Optional[int] = Query(None, alias="productId"),
    db: Session = Depends(get_db),
):
    positions = []
    if product_id:
        positions = warehouse_service.get_positions(db, warehouse_id, product_id)
    return {"warehouse_id": warehouse_id, "product_id": product_id, "positions": positions}


@router.put("/{warehouse_id}/positions", response_model=PositionsSaved)
def save_positions(
    warehouse_id: int,
    payload: PositionsUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    points = [p.model_dump() for p in payload.positions]
    warehouse_service.save_positions(db, warehouse_id, payload.product_id, points)

    write_log(db, user_id=current_user.id, action="POSITIONS_SAVE", resource="warehouses",
              status="SUCCESS", ip=client_ip(request),
              meta={"warehouse_id": warehouse_id, "product_id": payload.product_id, "count": len(points)})
    return {"warehouse_id": warehouse_id, "product_id": payload.product_id, "positions": points}
