#!/usr/bin/env python3
"""
Grant the admin custom claim to a Firebase user.

Usage:
    python -m gallery_api.scripts.set_admin_claim <uid>

The user has to sign in again (or refresh their ID token) before the
claim shows up in the tokens the API verifies.
"""

import argparse
import logging
import sys

from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError

from gallery_api.services.firebase_service import FirebaseService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv=None, service: FirebaseService = None) -> int:
    parser = argparse.ArgumentParser(description="Set the admin custom claim for a Firebase user")
    parser.add_argument("uid", help="Firebase user id")
    parser.add_argument("--claim", default=None, help="Claim name (defaults to ADMIN_CLAIM)")
    args = parser.parse_args(argv)

    uid = args.uid.strip()
    if not uid:
        logger.error("UID is required")
        return 1

    service = service or FirebaseService()
    try:
        user = service.set_admin_claim(uid, claim=args.claim)
    except (ValueError, FirebaseError, GoogleAuthError) as e:
        logger.error(f"Failed to set admin claim for {uid}: {e}")
        return 1

    logger.info(f"Admin claim successfully set for user: {user['uid']} ({user['email']})")
    logger.info(f"Custom claims: {user['customClaims']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
