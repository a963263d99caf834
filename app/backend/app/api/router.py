"""Top-level API router."""

from fastapi import APIRouter

from app.api.routes.exports import router as exports_router
from app.api.routes.health import router as health_router
from app.api.routes.projects import router as projects_router
from app.api.routes.rate_cards import router as rate_cards_router
from app.api.routes.resource_lists import router as resource_lists_router
from app.api.routes.resource_plans import router as resource_plans_router
from app.api.routes.weeks import router as weeks_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(projects_router)
api_router.include_router(rate_cards_router)
api_router.include_router(resource_lists_router)
api_router.include_router(resource_plans_router)
api_router.include_router(weeks_router)
api_router.include_router(exports_router)
