"""Shared FastAPI dependencies; tests swap them through ``app.dependency_overrides``."""
from fastapi.security import HTTPBearer
from typing import Optional
from gallery_api.config.settings import settings
from gallery_api.services.auth_service import AuthService
from gallery_api.services.cloudinary_service import MediaStoreProvider, media_store_provider
from gallery_api.utils.errors import InvalidArgumentError

# Missing or malformed headers come through as None; AuthService rejects them
# after request validation has run.
security = HTTPBearer(auto_error=False)

auth_service = None

def get_auth_service() -> AuthService:
    """Lazily build the auth service so importing the app needs no Firebase credentials."""
    global auth_service
    if auth_service is None:
        auth_service = AuthService(admin_claim=settings.ADMIN_CLAIM)
    return auth_service

def get_store_provider() -> MediaStoreProvider:
    return media_store_provider

def require_event(event: Optional[str]) -> str:
    if event is None or not event.strip():
        raise InvalidArgumentError("Missing event parameter")
    return event
