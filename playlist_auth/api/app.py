import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = exc.to_dict()
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def build_lifespan(ApplicationConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from playlist_auth.depends import AsyncSessionLocal, engine
        from playlist_auth.tasks.reset_token_cleanup import run_reset_token_cleanup

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        cleanup_task = None
        if ApplicationConfig.RESET_TOKEN_SWEEP_ENABLED:
            cleanup_task = asyncio.create_task(
                run_reset_token_cleanup(
                    AsyncSessionLocal, ApplicationConfig.RESET_TOKEN_SWEEP_INTERVAL_SECONDS
                )
            )

        yield

        if cleanup_task is not None:
            cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await cleanup_task
        await engine.dispose()

    return lifespan


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(
        title="Playlist Auth API", version="0.1.0", lifespan=build_lifespan(ApplicationConfig)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from playlist_auth.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
