import asyncio
import logging
import threading
from functools import partial
from typing import Any, Callable, Dict, List, Optional
import cloudinary
import cloudinary.uploader
from gallery_api.config.settings import Settings
from gallery_api.utils.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

APPROVED_TAG = "approved"


class CloudinaryStore:
    """Async facade over the blocking Cloudinary SDK.

    Each call runs on the default executor so a bulk request can fan out
    one SDK call per asset.
    """

    def __init__(self, max_results: int = 500):
        self.max_results = max_results

    async def _run(self, label: str, func: Callable, *args, **kwargs) -> Any:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args, **kwargs))
        except Exception as e:
            logger.error(f"[Cloudinary] {label} failed: {type(e).__name__}: {e}", exc_info=True)
            raise UpstreamError()

    def _search(self, expression: str, sort_by: Optional[str], with_tags: bool) -> Dict[str, Any]:
        query = cloudinary.Search().expression(expression)
        if sort_by:
            query = query.sort_by(sort_by, "desc")
        if with_tags:
            query = query.with_field("tags")
        return query.max_results(self.max_results).execute()

    async def search(
        self,
        expression: str,
        sort_by: Optional[str] = None,
        with_tags: bool = False,
    ) -> Dict[str, Any]:
        """Run one search page and return the raw response (``resources``, ``total_count``)."""
        logger.info(f"[Cloudinary] Search expression={expression!r} max_results={self.max_results}")
        result = await self._run("search", self._search, expression, sort_by, with_tags)
        resources = result.get("resources") or []
        total_count = result.get("total_count")
        logger.info(f"[Cloudinary] Search returned {len(resources)} resources (total_count={total_count})")
        if (total_count is not None and total_count > len(resources)) or result.get("next_cursor"):
            logger.warning(
                f"[Cloudinary] Search truncated at {len(resources)} of {total_count} resources "
                f"for expression={expression!r}"
            )
        return result

    async def add_tag(self, tag: str, public_id: str) -> Dict[str, Any]:
        return await self._run(f"add_tag {tag} {public_id}", cloudinary.uploader.add_tag, tag, [public_id])

    async def remove_tag(self, tag: str, public_id: str) -> Dict[str, Any]:
        return await self._run(f"remove_tag {tag} {public_id}", cloudinary.uploader.remove_tag, tag, [public_id])

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        return await self._run(f"destroy {public_id}", cloudinary.uploader.destroy, public_id)


class MediaStoreProvider:
    """Process-wide store configuration, resolved once on first success.

    A failed resolution is not remembered; the next request tries again
    with freshly loaded settings.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = Settings):
        self.settings_factory = settings_factory
        self._store: Optional[CloudinaryStore] = None
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return self._store is not None

    def get_store(self) -> CloudinaryStore:
        if self._store is not None:
            return self._store

        with self._lock:
            if self._store is None:
                settings = self.settings_factory()
                creds = settings.cloudinary_credentials()
                missing = [name for name, value in creds.items() if not value]
                if missing:
                    logger.error(f"[Cloudinary] Credentials not configured, missing: {', '.join(missing)}")
                    raise ConfigurationError("Cloudinary credentials not configured")

                cloudinary.config(secure=True, **creds)
                self._store = CloudinaryStore(max_results=settings.SEARCH_MAX_RESULTS)
                logger.info(f"[Cloudinary] Configured cloud_name={creds['cloud_name']}")
        return self._store


def is_approved(resource: Dict[str, Any]) -> bool:
    return APPROVED_TAG in (resource.get("tags") or [])


def resource_tags(resource: Dict[str, Any]) -> List[str]:
    return list(resource.get("tags") or [])


media_store_provider = MediaStoreProvider()
