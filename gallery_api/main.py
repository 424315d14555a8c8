from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from gallery_api.api import admin, public
from gallery_api.api.dependencies import get_store_provider
from gallery_api.config.settings import settings
from gallery_api.utils.errors import (
    GatewayError, MethodNotAllowedError, INTERNAL, INVALID_ARGUMENT, NOT_FOUND, status_for_kind
)
import logging
import os
from contextlib import asynccontextmanager

logging.basicConfig(
    level=(settings.LOG_LEVEL or os.getenv("LOG_LEVEL", "info")).upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
log = logging.getLogger("gallery-api")

SERVICE_VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting gallery moderation API...")

    log.info("=== ENVIRONMENT VARIABLES DEBUG ===")
    critical_env_vars = [
        "CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET",
        "FIREBASE_SERVICE_ACCOUNT_BASE64", "FIREBASE_PROJECT_ID", "CORS_ORIGINS",
    ]

    for var in critical_env_vars:
        value = os.getenv(var)
        if value:
            # Mask sensitive values
            if any(sensitive in var.upper() for sensitive in ["KEY", "SECRET", "ACCOUNT"]):
                masked_value = f"{value[:4]}...{value[-2:]}" if len(value) > 12 else "***"
                log.info(f"  {var}: {masked_value}")
            else:
                log.info(f"  {var}: {value}")
        else:
            log.warning(f"  {var}: NOT SET")
    log.info("=== END DEBUG ===")

    yield

    log.info("Gallery moderation API stopped")

def _parse_cors(origins_env: str | None) -> list[str]:
    if not origins_env:
        return ["*"]
    value = origins_env.strip()
    if value == "*" or value == '["*"]':
        return ["*"]

    out = [o.strip() for o in value.split(",") if o.strip()]
    return out or ["*"]

def error_response(status_code: int, message: str, kind: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "kind": kind},
        headers=headers,
    )

def create_app() -> FastAPI:
    app = FastAPI(
        title="event gallery moderation api",
        description="approval gateway between the gallery frontend and Cloudinary",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    cors_origins = _parse_cors(settings.CORS_ORIGINS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False if cors_origins == ["*"] else True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        log.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.kind}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.kind)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        locations = [tuple(error.get("loc", ())) for error in exc.errors()]
        if any(loc and loc[0] == "body" for loc in locations):
            message = "Missing or invalid publicIds array"
        else:
            message = "Invalid request parameters"
        log.warning(f"{request.method} {request.url.path} -> 400: {message} {locations}")
        return error_response(status_for_kind(INVALID_ARGUMENT), message, INVALID_ARGUMENT)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            not_allowed = MethodNotAllowedError()
            return error_response(not_allowed.status_code, not_allowed.message, not_allowed.kind, headers=exc.headers)
        if exc.status_code == 404:
            return error_response(404, "Not found", NOT_FOUND)
        return error_response(exc.status_code, str(exc.detail), INTERNAL)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, "Internal server error", INTERNAL)

    app.include_router(admin.router, prefix="/api", tags=["admin"])
    app.include_router(public.router, prefix="/api", tags=["public"])

    @app.get("/health")
    async def health():
        creds = settings.cloudinary_credentials()
        return {
            "status": "ok",
            "service": "gallery-api",
            "version": SERVICE_VERSION,
            "storage": "Cloudinary",
            "auth": "Firebase Auth",
            "diagnostics": {
                "cloudinary_credentials": "SET" if all(creds.values()) else "NOT SET",
                "cloudinary_configured": get_store_provider().is_configured,
                "firebase_service_account": "SET" if settings.FIREBASE_SERVICE_ACCOUNT_BASE64 else "NOT SET",
                "firebase_project_id": settings.FIREBASE_PROJECT_ID or "not_set",
            },
        }

    @app.get("/")
    async def root():
        return {
            "docs": "/docs",
            "health": "/health"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8080))
    print(f"Starting gallery API on port {port}")
    uvicorn.run("gallery_api.main:app", host="0.0.0.0", port=port)
