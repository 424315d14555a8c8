import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from fastapi.security import HTTPAuthorizationCredentials
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError
from gallery_api.utils.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], Dict[str, Any]]


@dataclass(frozen=True)
class AuthPrincipal:
    """Caller resolved from a verified bearer token."""
    subject_id: str
    is_admin: bool


class AuthService:
    """Bearer token verification and admin capability check."""

    # Every verification failure is reported with this one message
    INVALID_TOKEN_MESSAGE = "Invalid authentication token"

    def __init__(self, verifier: Optional[TokenVerifier] = None, admin_claim: str = "admin"):
        if verifier is None:
            from gallery_api.services.firebase_service import firebase_service
            verifier = firebase_service.verify_id_token
        self.verifier = verifier
        self.admin_claim = admin_claim

    def extract_token(self, credentials: Optional[HTTPAuthorizationCredentials]) -> str:
        """Token from the ``HTTPBearer`` credentials; ``None`` means no usable header."""
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise UnauthenticatedError("Missing or invalid authorization header")

        token = (credentials.credentials or "").strip()
        if not token:
            raise UnauthenticatedError("Missing or invalid authorization header")
        return token

    def authenticate(self, credentials: Optional[HTTPAuthorizationCredentials]) -> AuthPrincipal:
        token = self.extract_token(credentials)

        try:
            claims = self.verifier(token)
        except (ValueError, FirebaseError, GoogleAuthError) as e:
            logger.warning(f"[Auth] Token verification failed: {type(e).__name__}: {e}")
            raise UnauthenticatedError(self.INVALID_TOKEN_MESSAGE)

        subject_id = claims.get("uid") or claims.get("sub")
        if not subject_id:
            logger.warning("[Auth] Verified token carries no subject")
            raise UnauthenticatedError(self.INVALID_TOKEN_MESSAGE)

        return AuthPrincipal(
            subject_id=subject_id,
            is_admin=claims.get(self.admin_claim) is True,
        )

    def authorize_admin(self, credentials: Optional[HTTPAuthorizationCredentials]) -> str:
        """Return the caller's subject id if the token carries the admin claim."""
        principal = self.authenticate(credentials)
        if not principal.is_admin:
            logger.warning(f"[Auth] Admin check failed for uid={principal.subject_id}")
            raise ForbiddenError("User is not an admin")

        logger.info(f"[Auth] Admin authorized uid={principal.subject_id}")
        return principal.subject_id
