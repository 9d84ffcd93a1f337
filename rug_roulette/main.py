import logging
from contextlib import asynccontextmanager

from broadcaster import Broadcast
from fastapi import FastAPI

from .config import BROADCAST_URL, LOG_LEVEL, PORT
from .game import PoolBroadcaster, PoolEngine, PoolSettings
from .middleware import add_cors_middleware, add_logging_middleware
from .routers import pool_router, websocket_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger(__name__)


def create_app(
    settings: PoolSettings | None = None, broadcast_url: str = BROADCAST_URL
) -> FastAPI:
    broadcast = Broadcast(broadcast_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await broadcast.connect()
        engine = PoolEngine(settings or PoolSettings.from_env(), PoolBroadcaster(broadcast))
        try:
            async with engine.running():
                app.state.engine = engine
                yield
        finally:
            app.state.engine = None
            await broadcast.disconnect()
            log.info("shutting down")

    app = FastAPI(title="Rug Roulette", lifespan=lifespan)
    app.add_middleware(add_cors_middleware)
    app.add_middleware(add_logging_middleware)

    app.include_router(pool_router)
    app.include_router(websocket_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
