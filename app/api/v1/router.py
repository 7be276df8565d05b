from fastapi import APIRouter
from api.v1.routes.findings import router as findings_router


# Main v1 router
router = APIRouter()
router.include_router(findings_router)
