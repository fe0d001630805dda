from fastapi import APIRouter

from wikidash.api.v1 import config, dashboard, impact, users

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(dashboard.router)
api_router.include_router(users.router)
api_router.include_router(impact.router)
api_router.include_router(config.router)
