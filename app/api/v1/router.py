from fastapi import APIRouter

from api.v1.routes.alerts import router as alerts_router
from api.v1.routes.notifications import router as notifications_router

router = APIRouter()
router.include_router(alerts_router)
router.include_router(notifications_router)
