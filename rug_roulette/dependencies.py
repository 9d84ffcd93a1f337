from typing import Annotated

from fastapi import Depends
from fastapi.requests import HTTPConnection

from .game import MessageDispatcher, PoolEngine


def get_engine(connection: HTTPConnection) -> PoolEngine:
    """The engine instance started by the app lifespan."""
    engine = getattr(connection.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Pool engine not initialized")
    return engine


def get_dispatcher(engine: Annotated[PoolEngine, Depends(get_engine)]) -> MessageDispatcher:
    return MessageDispatcher(engine)


EngineDep = Annotated[PoolEngine, Depends(get_engine)]
DispatcherDep = Annotated[MessageDispatcher, Depends(get_dispatcher)]
