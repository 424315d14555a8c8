import logging
from typing import Any, Dict, Iterable, List

from gallery_api.models.image import EventFolder
from gallery_api.services.event_filter import EVENTS_ROOT, IMAGE_RESOURCE_TYPE, event_folder_path

logger = logging.getLogger(__name__)


def event_name_from_public_id(public_id: str):
    """Event name encoded in a public_id, or None for top-level assets.

    ``events/<name>/<file>`` yields ``<name>``; ``<name>/<file>`` yields
    ``<name>``; a public_id without ``/`` belongs to no event.
    """
    if "/" not in public_id:
        return None

    parts = public_id.split("/")
    if parts[0] == EVENTS_ROOT and len(parts) >= 3:
        return parts[1]
    return parts[0]


def derive_event_folders(public_ids: Iterable[str]) -> List[EventFolder]:
    """Distinct event folders in order of first occurrence."""
    seen: Dict[str, EventFolder] = {}
    for public_id in public_ids:
        name = event_name_from_public_id(public_id)
        if name is None:
            logger.debug(f"[Folders] Skipping top-level asset {public_id}")
            continue
        if name not in seen:
            logger.debug(f"[Folders] Found event {name!r} from {public_id}")
            seen[name] = EventFolder(name=name, path=event_folder_path(name))
    return list(seen.values())


async def list_event_folders(store) -> List[EventFolder]:
    """Scan one page of image resources and derive the known events."""
    result = await store.search(f"resource_type:{IMAGE_RESOURCE_TYPE}")
    resources: List[Dict[str, Any]] = result.get("resources") or []

    folders = derive_event_folders(r["public_id"] for r in resources if r.get("public_id"))
    logger.info(f"[Folders] {len(folders)} event folders from {len(resources)} images")
    return folders
