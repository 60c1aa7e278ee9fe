from fastapi import APIRouter

from app.api.v1.endpoints import access, contests, execute, participation

api_router = APIRouter()
api_router.include_router(contests.router, prefix="/contests", tags=["contests"])
api_router.include_router(participation.router, prefix="/participation", tags=["participation"])
api_router.include_router(execute.router, prefix="/execute", tags=["execute"])
api_router.include_router(access.router, tags=["access"])
