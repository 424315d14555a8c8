import json
import base64
import logging
import threading
from typing import Any, Dict, Optional
import firebase_admin
from firebase_admin import auth, credentials
from gallery_api.config.settings import Settings

logger = logging.getLogger(__name__)

class FirebaseService:
    """Lazily initialised Firebase app used for ID token verification and claims."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.app: Optional[firebase_admin.App] = None
        self._lock = threading.Lock()

    def _build_credential(self):
        encoded = (self.settings.FIREBASE_SERVICE_ACCOUNT_BASE64 or "").strip()
        if not encoded:
            logger.info("[Firebase] FIREBASE_SERVICE_ACCOUNT_BASE64 not set - using application default credentials")
            return credentials.ApplicationDefault()

        service_account_info = json.loads(base64.b64decode(encoded).decode("utf-8"))
        return credentials.Certificate(service_account_info)

    def get_app(self) -> firebase_admin.App:
        if self.app is not None:
            return self.app

        with self._lock:
            if self.app is None:
                options = {}
                if self.settings.FIREBASE_PROJECT_ID:
                    options["projectId"] = self.settings.FIREBASE_PROJECT_ID.strip()

                try:
                    self.app = firebase_admin.get_app()
                    logger.info("[Firebase] Reusing existing default app")
                except ValueError:
                    self.app = firebase_admin.initialize_app(self._build_credential(), options or None)
                    logger.info(f"[Firebase] Initialized app project={options.get('projectId', 'default')}")
        return self.app

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        """Verify a Firebase ID token, rejecting revoked sessions, and return its claims."""
        return auth.verify_id_token(token, app=self.get_app(), check_revoked=True)

    def set_admin_claim(self, uid: str, claim: Optional[str] = None) -> Dict[str, Any]:
        """Grant the admin custom claim to a user and return the stored claims."""
        claim = claim or self.settings.ADMIN_CLAIM
        app = self.get_app()
        auth.set_custom_user_claims(uid, {claim: True}, app=app)
        user = auth.get_user(uid, app=app)
        logger.info(f"[Firebase] Admin claim set uid={uid} email={user.email}")
        return {
            "uid": user.uid,
            "email": user.email,
            "customClaims": user.custom_claims or {},
        }

firebase_service = FirebaseService()
