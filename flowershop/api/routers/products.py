# flowershop/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from flowershop.data.database import get_db
from flowershop.domain.schemas import ProductOut
from flowershop.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(
    category: str | None = Query(None),
    featured: bool | None = Query(None),
    db: Session = Depends(get_db),
):
    return ProductService(db).list_products(category=category, featured=featured)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
