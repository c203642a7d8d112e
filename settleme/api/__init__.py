"""HTTP API routers."""

from .exports import router

__all__ = ["router"]
