from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional
import logging

from gallery_api.api.dependencies import get_auth_service, get_store_provider, require_event, security
from gallery_api.models.image import (
    AdminImage, AdminImageListResponse, BulkMutationRequest,
    ApproveResponse, UnapproveResponse, DeleteResponse
)
from gallery_api.services.auth_service import AuthService
from gallery_api.services.bulk_mutation import APPROVE, UNAPPROVE, DELETE, BulkMutationExecutor
from gallery_api.services.cloudinary_service import MediaStoreProvider, is_approved, resource_tags
from gallery_api.services.event_filter import build_filter
from gallery_api.utils.errors import GatewayError

logger = logging.getLogger(__name__)

router = APIRouter()

async def _run_bulk(
    operation: str,
    log_tag: str,
    payload: BulkMutationRequest,
    credentials: Optional[HTTPAuthorizationCredentials],
    auth: AuthService,
    provider: MediaStoreProvider,
):
    try:
        uid = auth.authorize_admin(credentials)
        logger.info(f"[{log_tag}] start uid={uid} count={len(payload.publicIds)}")

        executor = BulkMutationExecutor(provider.get_store())
        results = await executor.apply(operation, payload.publicIds)

        logger.info(f"[{log_tag}] success uid={uid} count={len(results)}")
        return results

    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"[{log_tag}] error: {e}", exc_info=True)
        raise GatewayError()

@router.get("/adminListImages", response_model=AdminImageListResponse)
async def admin_list_images(
    event: Optional[str] = None,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
    provider: MediaStoreProvider = Depends(get_store_provider),
):
    """All images of an event, pending and approved."""
    try:
        event = require_event(event)
        uid = auth.authorize_admin(credentials)
        logger.info(f"[ADMIN-LIST] event={event!r} uid={uid}")

        store = provider.get_store()
        result = await store.search(
            build_filter(event, approved_only=False).expression(),
            sort_by="created_at",
            with_tags=True,
        )

        images = [
            AdminImage(
                public_id=img["public_id"],
                secure_url=img.get("secure_url"),
                created_at=img.get("created_at"),
                tags=resource_tags(img),
                width=img.get("width"),
                height=img.get("height"),
                approved=is_approved(img),
            )
            for img in result.get("resources") or []
        ]

        return AdminImageListResponse(success=True, event=event, total=len(images), images=images)

    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"[ADMIN-LIST] error: {e}", exc_info=True)
        raise GatewayError()

@router.post("/adminApproveImages", response_model=ApproveResponse)
async def admin_approve_images(
    payload: BulkMutationRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
    provider: MediaStoreProvider = Depends(get_store_provider),
):
    """Add the ``approved`` tag to every listed image."""
    results = await _run_bulk(APPROVE, "ADMIN-APPROVE", payload, credentials, auth, provider)
    return ApproveResponse(success=True, approved=len(results), results=results)

@router.post("/adminUnapproveImages", response_model=UnapproveResponse)
async def admin_unapprove_images(
    payload: BulkMutationRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
    provider: MediaStoreProvider = Depends(get_store_provider),
):
    """Remove the ``approved`` tag from every listed image."""
    results = await _run_bulk(UNAPPROVE, "ADMIN-UNAPPROVE", payload, credentials, auth, provider)
    return UnapproveResponse(success=True, unapproved=len(results), results=results)

@router.post("/adminDeleteImages", response_model=DeleteResponse)
async def admin_delete_images(
    payload: BulkMutationRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
    provider: MediaStoreProvider = Depends(get_store_provider),
):
    """Permanently destroy every listed image. There is no undo."""
    results = await _run_bulk(DELETE, "ADMIN-DELETE", payload, credentials, auth, provider)
    return DeleteResponse(success=True, deleted=len(results), results=results)
