"""FastAPI application entry point."""

import os
import logging
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Must be called before importing modules that read env vars (like api.security)
load_dotenv()

from api.routes import auth, deposits, health, reports, users
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import MongoConnection
from adapter.mongodb.indexes import ensure_all_indexes

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

try:
    VERSION = version("member-deposits")
except PackageNotFoundError:
    VERSION = "0.0.0"

SERVICE_NAME = "Member Deposits API"
STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open MongoDB and ensure indexes, close on shutdown."""
    connection = MongoConnection()
    app.state.mongo = connection

    db = connection.get_database() if connection.connect() else None
    if db is not None:
        if ensure_all_indexes(db):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield  # App runs here

    connection.close()


app = FastAPI(
    title=SERVICE_NAME,
    description="Admin backend for members and their monthly deposits",
    version=VERSION,
    lifespan=lifespan,
)

# When using JWT authentication with Authorization header:
# - If CORS_ORIGINS="*": allow_credentials must be False (browsers don't support credentials with wildcard)
# - If CORS_ORIGINS is a specific list: allow_credentials can be True
cors_origins_env = os.getenv("CORS_ORIGINS", "*")

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every error leaves as {"success": false, "message": ...}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Route handlers report missing records with their own detail; a bare
    # "Not Found" only comes from the router. An unknown method on a known
    # path is an unmatched route too.
    if exc.status_code == 405 or (exc.status_code == 404 and exc.detail == "Not Found"):
        return JSONResponse(status_code=404, content={"success": False, "message": "Route not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.info("Request validation failed", extra={"path": request.url.path, "errors": errors})
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"success": False, "message": "Something went wrong!"})


# Register routes
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(deposits.router)
app.include_router(reports.router)
app.include_router(health.router)


@app.get("/", include_in_schema=False)
async def root():
    """Static landing page."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Application logs (via our structured logging) will still be captured
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False,
    )
