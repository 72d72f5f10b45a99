from fastapi import APIRouter

from healthmap.api.endpoints import auth
from healthmap.api.endpoints import assessments

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(assessments.router, prefix="/assessments", tags=["assessments"])
