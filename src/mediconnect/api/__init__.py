"""FastAPI routes for MediConnect."""

from mediconnect.api.admin import router as admin_router
from mediconnect.api.deps import AdminOnly, Authenticated, DoctorOnly, Provider, guarded
from mediconnect.api.pages import not_found_router
from mediconnect.api.pages import router as pages_router
from mediconnect.api.routes import router

__all__ = [
    "admin_router",
    "AdminOnly",
    "Authenticated",
    "DoctorOnly",
    "Provider",
    "guarded",
    "not_found_router",
    "pages_router",
    "router",
]
