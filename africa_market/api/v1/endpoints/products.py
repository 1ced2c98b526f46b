"""Public product catalog."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from africa_market.db.session import get_db
from africa_market.models.product import Product
from africa_market.schemas.product import ProductRead
from africa_market.services.catalog_service import get_product, list_products

router: APIRouter = APIRouter()


@router.get("", response_model=list[ProductRead])
def read_products(db: Session = Depends(get_db)) -> list[Product]:
    return list_products(db)


@router.get("/{product_id}", response_model=ProductRead)
def read_product(product_id: int, db: Session = Depends(get_db)) -> Product:
    return get_product(db, product_id)
