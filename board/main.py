import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from board.api.router import api_router
from board.core.config import settings
from board.core.exceptions import BoardError
from board.db.async_session import get_async_db_manager, shutdown_async_database, startup_async_database
from board.services.async_auth import AsyncAuthService
from board.services.async_error_handler import AsyncErrorHandler
from board.utils.logger import api_logger, configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    redirect_slashes=False,
)


# Custom OpenAPI schema with explicit security scheme
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.PROJECT_DESCRIPTION,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "OAuth2PasswordBearer": {
            "type": "oauth2",
            "flows": {
                "password": {
                    "tokenUrl": f"{settings.API_V1_PREFIX}/auth/token",
                    "scopes": {}
                }
            }
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(BoardError)
async def board_error_handler(request: Request, exc: BoardError):
    api_logger.warning("Operation rejected", exc.error_code.upper(), method=request.method,
                       path=request.url.path, status=exc.status_code, detail=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error_code},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    error_info = AsyncErrorHandler.classify_error(exc)
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=error_info["status_code"],
        content={"detail": error_info["detail"], "error": "database_error"},
    )


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup."""
    try:
        configure_logging()
        logger.info("Starting up Board API...")

        await startup_async_database()
        logger.info("Async database initialized successfully")

        manager = await get_async_db_manager()
        async with manager.async_session_factory() as session:
            await AsyncAuthService.ensure_bootstrap_moderator(session)

        logger.info("Board API startup completed successfully")

    except Exception as e:
        logger.error(f"Failed to start up application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on application shutdown."""
    try:
        logger.info("Shutting down Board API...")
        await shutdown_async_database()
        logger.info("Board API shutdown completed successfully")

    except Exception as e:
        logger.error(f"Error during application shutdown: {e}")


@app.get("/")
async def root():
    return {"status": "ok", "message": "Welcome to Board API"}
