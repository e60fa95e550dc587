# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .admin import router as admin_router
from .cotizaciones import router as cotizaciones_router
from .catalogos import router as catalogos_router
from .requerimientos import router as requerimientos_router
from .health import router as health_router


api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(admin_router)

# Commercial data
api_router.include_router(cotizaciones_router)
api_router.include_router(catalogos_router)
api_router.include_router(requerimientos_router)

api_router.include_router(health_router)

__all__ = ["api_router"]
