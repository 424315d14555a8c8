import asyncio
import logging
from typing import List

from gallery_api.models.image import BulkOutcome
from gallery_api.services.cloudinary_service import APPROVED_TAG
from gallery_api.utils.errors import BulkMutationError, InvalidArgumentError

logger = logging.getLogger(__name__)

APPROVE = "approve"
UNAPPROVE = "unapprove"
DELETE = "delete"

OPERATIONS = (APPROVE, UNAPPROVE, DELETE)


class BulkMutationExecutor:
    """Applies one operation to every public_id of a batch, concurrently.

    The batch is not atomic. When any call fails the whole request fails,
    but changes already applied to other ids stay in place and nothing is
    rolled back. Callers re-query to learn the resulting state.
    """

    def __init__(self, store):
        self.store = store

    @staticmethod
    def validate_ids(public_ids) -> List[str]:
        if not isinstance(public_ids, list) or not public_ids:
            raise InvalidArgumentError("Missing or invalid publicIds array")
        for public_id in public_ids:
            if not isinstance(public_id, str) or not public_id:
                raise InvalidArgumentError("Missing or invalid publicIds array")
        return public_ids

    def _call(self, operation: str, public_id: str):
        if operation == APPROVE:
            return self.store.add_tag(APPROVED_TAG, public_id)
        if operation == UNAPPROVE:
            return self.store.remove_tag(APPROVED_TAG, public_id)
        return self.store.destroy(public_id)

    async def apply(self, operation: str, public_ids: List[str]) -> List[BulkOutcome]:
        if operation not in OPERATIONS:
            raise InvalidArgumentError(f"Unknown operation: {operation}")
        self.validate_ids(public_ids)

        logger.info(f"[Bulk] {operation} start count={len(public_ids)}")
        results = await asyncio.gather(
            *[self._call(operation, public_id) for public_id in public_ids],
            return_exceptions=True,
        )

        outcomes = []
        failed_ids = []
        for public_id, result in zip(public_ids, results):
            if isinstance(result, BaseException):
                failed_ids.append(public_id)
                logger.error(f"[Bulk] {operation} failed public_id={public_id}: {type(result).__name__}: {result}")
            else:
                outcomes.append(BulkOutcome(public_id=public_id, result=dict(result or {})))

        if failed_ids:
            logger.error(
                f"[Bulk] {operation} failed for {len(failed_ids)} of {len(public_ids)} ids; "
                f"{len(outcomes)} already applied and not rolled back"
            )
            raise BulkMutationError(operation, failed_ids, len(public_ids))

        logger.info(f"[Bulk] {operation} done count={len(outcomes)}")
        return outcomes
