"""
API routers module.
"""
from symptom_svc.api.routers.health import router as health_router
from symptom_svc.api.routers.session import router as session_router
from symptom_svc.api.routers.symptoms import router as symptoms_router

__all__ = ["health_router", "session_router", "symptoms_router"]
