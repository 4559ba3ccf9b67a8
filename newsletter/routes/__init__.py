# newsletter/routes/__init__.py
from .health import router as health_router
from .newsletters import router as newsletters_router
from .subscriptions import router as subscriptions_router

__all__ = ["health_router", "newsletters_router", "subscriptions_router"]
