from .pool import router as pool_router
from .websocket_router import router as websocket_router

__all__ = ["pool_router", "websocket_router"]
