"""
API路由模块
"""

from .storage import register_storage_routes, router as storage_router

__all__ = ["register_storage_routes", "storage_router"]
