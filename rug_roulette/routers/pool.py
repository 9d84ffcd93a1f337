from fastapi import APIRouter

from ..dependencies import EngineDep

router = APIRouter()


@router.get("/")
async def read_root():
    return {"message": "Rug Roulette backend running"}


@router.get("/api/pool")
async def get_pool(engine: EngineDep):
    return engine.pool.to_wire()


@router.get("/api/stats")
async def get_stats(engine: EngineDep):
    return engine.stats().to_wire()
