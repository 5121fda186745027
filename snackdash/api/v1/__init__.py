"""API v1 router."""
from fastapi import APIRouter

from snackdash.api.v1.auth import router as auth_router
from snackdash.api.v1.stores import router as stores_router, orders_router
from snackdash.api.v1.admin import router as admin_router
from snackdash.api.v1.platform import router as platform_router


router = APIRouter(prefix="/v1")

router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
router.include_router(stores_router, prefix="/stores", tags=["Stores"])
router.include_router(orders_router, prefix="/orders", tags=["Order Tracking"])
router.include_router(admin_router, prefix="/admin", tags=["Store Admin"])
router.include_router(platform_router, prefix="/platform", tags=["Platform"])
