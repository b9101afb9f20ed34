"""API v1 router composition."""

from fastapi import APIRouter

from catalog_tracer.api.v1.endpoints import auth, changes

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(changes.router, prefix="/changes", tags=["changes"])
