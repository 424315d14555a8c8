"""Error kinds raised by the gateway and the status code each one maps to."""
from typing import Dict

INVALID_ARGUMENT = "invalid_argument"
UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"
METHOD_NOT_ALLOWED = "method_not_allowed"
NOT_FOUND = "not_found"
CONFIGURATION_ERROR = "configuration_error"
UPSTREAM_FAILURE = "upstream_failure"
INTERNAL = "internal"

STATUS_BY_KIND: Dict[str, int] = {
    INVALID_ARGUMENT: 400,
    UNAUTHENTICATED: 403,
    FORBIDDEN: 403,
    NOT_FOUND: 404,
    METHOD_NOT_ALLOWED: 405,
    CONFIGURATION_ERROR: 500,
    UPSTREAM_FAILURE: 500,
    INTERNAL: 500,
}


class GatewayError(Exception):
    """Base class for failures that are reported to the caller."""

    kind = INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_for_kind(self.kind)


class InvalidArgumentError(GatewayError):
    kind = INVALID_ARGUMENT
    default_message = "Invalid request"


class UnauthenticatedError(GatewayError):
    kind = UNAUTHENTICATED
    default_message = "Invalid authentication token"


class ForbiddenError(GatewayError):
    kind = FORBIDDEN
    default_message = "Admin privileges required"


class MethodNotAllowedError(GatewayError):
    kind = METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class ConfigurationError(GatewayError):
    kind = CONFIGURATION_ERROR
    default_message = "Media store credentials not configured"


class UpstreamError(GatewayError):
    kind = UPSTREAM_FAILURE
    default_message = "Media store request failed"


class BulkMutationError(UpstreamError):
    """At least one per-id call of a bulk mutation failed.

    Ids that succeeded stay mutated; ``failed_ids`` lists the others.
    """

    def __init__(self, operation: str, failed_ids: list, total: int):
        self.operation = operation
        self.failed_ids = list(failed_ids)
        self.total = total
        super().__init__(f"Failed to {operation} images")


def status_for_kind(kind: str) -> int:
    return STATUS_BY_KIND.get(kind, 500)
