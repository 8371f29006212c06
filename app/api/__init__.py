from fastapi import APIRouter

from app.api.modules.waitlist.routes.waitlist_route import router as waitlist_router

router = APIRouter(prefix="/api")
router.include_router(waitlist_router)
