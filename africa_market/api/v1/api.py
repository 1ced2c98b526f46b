"""API v1 router composition."""

from fastapi import APIRouter

from africa_market.api.v1.endpoints import admin, auth, inquiries, products, users

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(inquiries.router, tags=["inquiries"])
