# recruitment_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from recruitment_api.config import Settings, load_settings
from recruitment_api.context import build_context
from recruitment_api.errors import register_exception_handlers
from recruitment_api.routers import auth, users
from recruitment_api.utils.database import init_db

logger = logging.getLogger("recruitment_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx = app.state.ctx
    logger.info("Application Startup: Creating database tables...")
    await init_db(ctx.engine)
    logger.info("Application Startup: Tables created successfully.")
    yield
    await ctx.engine.dispose()
    logger.info("Application Shutdown: database engine disposed.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(title="Recruitment Platform API", lifespan=lifespan)
    app.state.ctx = build_context(settings)

    app.add_middleware(
        CORSMiddleware, allow_origins=list(settings.cors_origins), allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )
    register_exception_handlers(app)

    logger.info("Including routers...")
    app.include_router(auth.router)   # /api/auth/...
    app.include_router(users.router)  # /api/users/...

    @app.get("/", response_class=PlainTextResponse)
    def read_root():
        return "Recruitment Platform API is running"

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run("recruitment_api.main:create_app", factory=True, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
