"""Event addressing: one event name, two store conventions.

An event's photos live either in the folder ``events/<event>`` or carry the
tag ``event_<event>``. Both conventions resolve to the same set of assets,
so every listing ORs them together. Folder matching is an exact, quoted
path match: ``events/Fasching`` does not match ``events/Fasching 2026``.
"""
from dataclasses import dataclass
from typing import Any, Mapping

from gallery_api.services.cloudinary_service import APPROVED_TAG

EVENTS_ROOT = "events"
EVENT_TAG_PREFIX = "event_"
IMAGE_RESOURCE_TYPE = "image"


def event_folder_path(event_id: str) -> str:
    return f"{EVENTS_ROOT}/{event_id}"


def event_tag(event_id: str) -> str:
    return f"{EVENT_TAG_PREFIX}{event_id}"


def quote_value(value: str) -> str:
    """Quote a search value, escaping backslashes and double quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def asset_folder(asset: Mapping[str, Any]) -> str:
    """Folder of an asset: the store's folder field, else the public_id prefix."""
    folder = asset.get("asset_folder") or asset.get("folder")
    if folder:
        return folder
    public_id = asset.get("public_id") or ""
    if "/" not in public_id:
        return ""
    return public_id.rsplit("/", 1)[0]


@dataclass(frozen=True)
class EventFilter:
    event_id: str
    approved_only: bool = False

    @property
    def folder_path(self) -> str:
        return event_folder_path(self.event_id)

    @property
    def tag(self) -> str:
        return event_tag(self.event_id)

    def expression(self) -> str:
        """Cloudinary search expression for this filter."""
        expression = (
            f"(folder={quote_value(self.folder_path)} OR tags={quote_value(self.tag)})"
            f" AND resource_type:{IMAGE_RESOURCE_TYPE}"
        )
        if self.approved_only:
            expression += f" AND tags={APPROVED_TAG}"
        return expression

    def matches(self, asset: Mapping[str, Any]) -> bool:
        """Evaluate the same predicate against a resource mapping."""
        resource_type = asset.get("resource_type") or IMAGE_RESOURCE_TYPE
        if resource_type != IMAGE_RESOURCE_TYPE:
            return False

        tags = set(asset.get("tags") or [])
        if self.approved_only and APPROVED_TAG not in tags:
            return False

        return asset_folder(asset) == self.folder_path or self.tag in tags


def build_filter(event_id: str, approved_only: bool = False) -> EventFilter:
    return EventFilter(event_id=event_id, approved_only=approved_only)
