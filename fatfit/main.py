import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fatfit.config import settings
from fatfit.db import async_session, engine
from fatfit.errors import ConfigurationError, ProviderError
from fatfit.tracker import store
from fatfit.tracker.food_router import router as food_router
from fatfit.tracker.router import router as users_router
from fatfit.tracker.scheduler import DailyReset

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO), format=settings.log_format)
logger = logging.getLogger("fatfit.main")


async def clear_daily_totals() -> int:
    async with async_session() as session:
        return await store.clear_calorie_totals(session)


@asynccontextmanager
async def lifespan(app: FastAPI):
    reset = DailyReset(
        clear_daily_totals,
        hour=settings.daily_reset_hour,
        minute=settings.daily_reset_minute,
        tz_name=settings.default_tz,
    )
    reset.start()
    logger.info("FatFit backend started")
    try:
        yield
    finally:
        await reset.stop()
        await engine.dispose()
        logger.info("FatFit backend stopped")


app = FastAPI(title="FatFit", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.include_router(users_router)
app.include_router(food_router)


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Refusing %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "quiz": "/quiz",
        "food": {
            "search": "/fatsecret-search?q=",
            "recipes": "/api/recipes/search?q=",
            "meal": "/caloriecounter/{username}/{meal_type}",
            "total": "/caloriecounter/{username}/total",
        },
        "plans": {
            "nutrition": "/api/fitness-tribe/recipes/{username}",
            "workout": "/api/fitness-tribe/workout/{username}",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


def run() -> None:
    """Console entry point (pyproject [project.scripts])."""
    uvicorn.run("fatfit.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
