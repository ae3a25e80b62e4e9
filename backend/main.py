"""
Wayfarer Backend API
App factory: builds the user store at startup and mounts the route modules.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import auth_router, health_router, users_router
from config import get_settings
from repositories import StoreError, UserStore
from store import open_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(store: Optional[UserStore] = None) -> FastAPI:
    """
    Build the FastAPI app. When `store` is given it is used as-is (after its
    load phase); otherwise the store configured in settings is opened.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is None:
            app.state.store = await open_store(settings)
        else:
            await store.load()
            app.state.store = store
        logger.info("User store ready: %s", app.state.store.describe())
        yield

    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def storage_failure(request: Request, exc: StoreError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse({"error": "storage failure"}, status_code=500)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
