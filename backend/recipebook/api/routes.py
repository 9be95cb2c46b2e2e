from fastapi import APIRouter

from recipebook.api.health import router as health_router
from recipebook.api.recipes import router as recipes_router
from recipebook.api.users import router as users_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(users_router)
router.include_router(recipes_router)
