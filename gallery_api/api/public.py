from fastapi import APIRouter, Depends
from typing import Optional
import logging

from gallery_api.api.dependencies import get_store_provider, require_event
from gallery_api.models.image import EventFolderListResponse, PublicImage, PublicImageListResponse
from gallery_api.services.cloudinary_service import MediaStoreProvider
from gallery_api.services.event_filter import build_filter
from gallery_api.services.folder_discovery import list_event_folders
from gallery_api.utils.errors import GatewayError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/listEventFolders", response_model=EventFolderListResponse)
async def list_folders(provider: MediaStoreProvider = Depends(get_store_provider)):
    """Event folders derived from the public_ids of all images."""
    try:
        folders = await list_event_folders(provider.get_store())
        return EventFolderListResponse(success=True, total=len(folders), folders=folders)

    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"[LIST-EVENTS] error: {e}", exc_info=True)
        raise GatewayError()

@router.get("/publicApprovedImages", response_model=PublicImageListResponse)
async def public_approved_images(
    event: Optional[str] = None,
    provider: MediaStoreProvider = Depends(get_store_provider),
):
    """Approved images of an event, without tags or approval state."""
    try:
        event = require_event(event)
        logger.info(f"[PUBLIC-APPROVED] event={event!r}")

        store = provider.get_store()
        result = await store.search(
            build_filter(event, approved_only=True).expression(),
            sort_by="created_at",
        )

        images = [
            PublicImage(
                public_id=img["public_id"],
                secure_url=img.get("secure_url"),
                created_at=img.get("created_at"),
                width=img.get("width"),
                height=img.get("height"),
            )
            for img in result.get("resources") or []
        ]

        return PublicImageListResponse(success=True, event=event, total=len(images), images=images)

    except GatewayError:
        raise
    except Exception as e:
        logger.error(f"[PUBLIC-APPROVED] error: {e}", exc_info=True)
        raise GatewayError()
