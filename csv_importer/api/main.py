from fastapi import APIRouter

from . import header
from . import health
from . import imports

api_router = APIRouter()

api_router.include_router(imports.router)
api_router.include_router(header.router)
api_router.include_router(health.router)
