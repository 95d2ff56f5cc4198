"""Product catalogue endpoints (stock-bearing rows only)."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from livemart.core.security import require_roles
from livemart.db.session import get_db
from livemart.models import Product, User
from livemart.schemas.product import ProductCreate, ProductResponse, ProductStockUpdate
from livemart.services.stock_service import ProductUnavailableError, set_stock

router: APIRouter = APIRouter()
_require_seller = require_roles("RETAILER", "WHOLESALER", "ADMIN")


@router.get("", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)) -> list[ProductResponse]:
    rows = db.scalars(
        select(Product).where(Product.deleted_at.is_(None), Product.is_active.is_(True)).order_by(Product.id.asc())
    ).all()
    return [ProductResponse.model_validate(row) for row in rows]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_seller),
) -> ProductResponse:
    product = Product(
        name=payload.name,
        category=payload.category,
        description=payload.description,
        price=payload.price,
        stock=payload.stock,
        retailer_id=current_user.id if current_user.role == "RETAILER" else None,
        wholesaler_id=current_user.id if current_user.role == "WHOLESALER" else None,
        is_active=True,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return ProductResponse.model_validate(product)


@router.patch("/{product_id}/stock", response_model=ProductResponse)
def update_stock(
    product_id: int,
    payload: ProductStockUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_seller),
) -> ProductResponse:
    product = db.get(Product, product_id)
    if product is not None and current_user.role != "ADMIN" and current_user.id not in {product.retailer_id, product.wholesaler_id}:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    try:
        product = set_stock(db, product_id, payload.stock)
    except ProductUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ProductResponse.model_validate(product)
