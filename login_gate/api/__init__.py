from .routes import ADMIN_PREFIX, router

__all__ = ["ADMIN_PREFIX", "router"]
