import logging
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi.openapi.utils import get_openapi
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from maasta.core.config import settings
from maasta.core.exceptions import CustomHTTPException, validation_exception_handler, http_exception_handler
from maasta.db.database import AsyncSessionLocal, init_db, async_engine
from maasta.api import artists, auditions, bookings, dashboard, events, networking, notifications, profiles, system
from maasta.utils.background import BackgroundTaskRunner
from maasta.utils.cache import CacheMaintenance, CacheVersionManager
from maasta.utils.swipe import SwipeDeckStore, SwipeService


logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    app.state.cache_manager.initialize()
    await app.state.cache_maintenance.start()
    yield
    await app.state.cache_maintenance.stop()
    await app.state.background.shutdown()
    await async_engine.dispose()


app = FastAPI(
    title=settings.PROJECT_TITLE,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.PROJECT_VERSION,
    openapi_url=settings.OPENAPI_URL,
    docs_url=settings.DOCS_URL,
    lifespan=lifespan
)

# Process-wide services, built once and injected through maasta.api.deps
app.state.cache_manager = CacheVersionManager()
app.state.cache_maintenance = CacheMaintenance(app.state.cache_manager)
app.state.background = BackgroundTaskRunner()
app.state.deck_store = SwipeDeckStore()
app.state.swipe_service = SwipeService(AsyncSessionLocal, app.state.background)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again later."}
    )

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception Handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(CustomHTTPException, http_exception_handler)

# API Routers
api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(artists.router)
api_router.include_router(profiles.router)
api_router.include_router(networking.router)
api_router.include_router(auditions.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
api_router.include_router(notifications.router)
api_router.include_router(dashboard.router)
api_router.include_router(system.router)
app.include_router(api_router)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_TITLE,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        routes=app.routes,
    )

    security_scheme = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {}).update(security_scheme)

    for path in openapi_schema["paths"].values():
        for operation in path.values():
            if any(tag in operation.get("tags", []) for tag in ["Profiles", "Networking", "Bookings", "Notifications", "Dashboard"]):
                operation.setdefault("security", []).append({"BearerAuth": []})

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/", include_in_schema=False)
async def health_check():
    return {
        "status": "healthy",
        "version": settings.PROJECT_VERSION,
        "cache_version": app.state.cache_manager.version,
        "docs": settings.DOCS_URL
    }
