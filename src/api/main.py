"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (connection, security)
load_dotenv()

# main.py is at src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import auth, health, progress, users
from api import security
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, get_database
from adapter.mongodb.indexes import ensure_all_indexes
from domain.model.errors import DomainError

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "NeuroSense API"
PORT = int(os.getenv("PORT", 3000))
API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    client = get_mongodb_client()
    if client:
        if ensure_all_indexes(get_database(client)):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    if security.USING_DEFAULT_SECRET:
        logger.warning("JWT_SECRET is not set; tokens are signed with the built-in default key")

    logger.info("Server running", extra={
        "url": f"http://localhost:{PORT}",
        "health": f"http://localhost:{PORT}{API_PREFIX}/health",
        "register": f"POST http://localhost:{PORT}{API_PREFIX}/auth/register",
        "login": f"POST http://localhost:{PORT}{API_PREFIX}/auth/login",
    })

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Account service: registration, login, profile and progress",
    version=VERSION,
    lifespan=lifespan,
)

# With "*" browsers refuse credentialed requests, so credentials are only
# allowed for an explicit origin list
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
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


def _describe_validation_errors(errors: list[dict]) -> str:
    """Turn pydantic errors into one line, e.g. 'email: value is not a valid email address'."""
    parts = []
    for error in errors[:3]:
        field = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _describe_validation_errors(exc.errors())},
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    # Domain errors that reach here were not mapped by a route
    logger.error("Unhandled domain error", exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


app.include_router(health.router, prefix=API_PREFIX)
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(progress.router, prefix=API_PREFIX)


# Registered last so it only sees paths no router claimed
@app.api_route(
    API_PREFIX + "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def api_not_found(path: str):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API endpoint not found")


if __name__ == "__main__":
    import uvicorn
    # Access logs would duplicate the structured application logs
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=PORT,
        access_log=False,
    )
