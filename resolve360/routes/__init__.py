# resolve360/routes/__init__.py
from .auth import auth_router
from .categories import categories_router
from .issues import issues_router
from .contractors import contractors_router
from .admin import admin_router

routers = [
    auth_router,
    categories_router,
    issues_router,
    contractors_router,
    admin_router
]

__all__ = ["routers"]
