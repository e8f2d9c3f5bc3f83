"""
Common utilities shared across routers.
"""

from .crud import build_crud_router

__all__ = [
    "build_crud_router",
]
