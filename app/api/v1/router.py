from fastapi import APIRouter

from app.api.routers import stats, teams, volunteers

api_router = APIRouter()

api_router.include_router(volunteers.router)
api_router.include_router(teams.router)
api_router.include_router(stats.router)
