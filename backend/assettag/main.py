# backend/assettag/main.py

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assettag.api.auth_routes import router as auth_router, users_router
from assettag.api.routes import router as api_router
from assettag.core.config import Settings, settings as default_settings
from assettag.core.database import init_db, make_engine, make_session_factory
from assettag.core.errors import AssetTagError
from assettag.core.logging import RequestIdMiddleware, setup_logging
from assettag.core.seed import seed_default_admin
from assettag.storage import get_photo_storage

log = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = make_engine(settings.database_url)
        init_db(engine)

        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        app.state.photo_storage = get_photo_storage(settings)

        db = app.state.session_factory()
        try:
            seed_default_admin(db, settings.default_admin_password)
        finally:
            db.close()

        log.info("startup", app_env=settings.app_env, database=engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            engine.dispose()
            log.info("shutdown")

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    @app.exception_handler(AssetTagError)
    async def asset_tag_error_handler(request: Request, exc: AssetTagError):
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users_router, prefix="/api", tags=["users"])
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
