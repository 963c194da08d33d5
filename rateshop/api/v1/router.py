from fastapi import APIRouter

from rateshop.api.v1.endpoints import rate_shop

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(rate_shop.router)
