from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import db
from core.config import Settings, get_settings
from core.errors import InternalErrorMiddleware, register_error_handlers
from core.log import setup_logging
from core.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from planning import router as planning_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    # Initialize the DB pool once per process.
    await db.init_pool(settings)
    try:
        yield
    finally:
        await db.close_pool()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="tasktime-api", lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = SlidingWindowLimiter(
        max_requests=settings.rate_limit_max,
        window_s=settings.rate_limit_window_s,
    )

    # Middleware added last runs first: CORS, the rate limiter, then the 500 responder.
    app.add_middleware(InternalErrorMiddleware)
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(planning_router.router, tags=["planning"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "tasktime api"}

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
