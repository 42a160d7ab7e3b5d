from fastapi import APIRouter
from ressly.api.v1 import health, reports, votes


def build_api_router(prefix: str) -> APIRouter:
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(health.router, tags=['health'])
    api_router.include_router(reports.router)
    api_router.include_router(votes.router)
    return api_router
