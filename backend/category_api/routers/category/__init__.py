from fastapi import APIRouter

from .upload import router as upload_router
from .management import router as management_router

PREFIX = "/api/category"

router = APIRouter()

# Combine everything under /api/category
router.include_router(management_router, prefix=PREFIX)
router.include_router(upload_router, prefix=PREFIX)
