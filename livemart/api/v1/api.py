"""API v1 router composition."""

from fastapi import APIRouter

from livemart.api.v1.endpoints import auth, delivery_partners, orders, products

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(delivery_partners.router, prefix="/delivery-partners", tags=["delivery-partners"])
