from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.security import HTTPAuthorizationCredentials
from firebase_admin import auth as firebase_auth

from gallery_api.services.auth_service import AuthService
from gallery_api.utils.errors import UpstreamError


class FakeMediaStore:
    """In-memory stand-in for CloudinaryStore with set semantics for tags."""

    def __init__(self, resources: Iterable[Dict[str, Any]] = (), fail_ids: Iterable[str] = ()) -> None:
        self.resources: Dict[str, Dict[str, Any]] = {}
        for resource in resources:
            stored = dict(resource)
            stored["tags"] = list(dict.fromkeys(resource.get("tags") or []))
            self.resources[stored["public_id"]] = stored
        self.fail_ids = set(fail_ids)
        self.expressions: List[str] = []
        self.search_calls: List[Dict[str, Any]] = []
        self.mutations: List[tuple] = []

    def tags_of(self, public_id: str) -> List[str]:
        return list(self.resources[public_id]["tags"])

    async def search(self, expression: str, sort_by=None, with_tags: bool = False) -> Dict[str, Any]:
        self.expressions.append(expression)
        self.search_calls.append({"expression": expression, "sort_by": sort_by, "with_tags": with_tags})
        resources = [dict(r, tags=list(r["tags"])) for r in self.resources.values()]
        return {"resources": resources, "total_count": len(resources)}

    def _record(self, operation: str, public_id: str) -> None:
        self.mutations.append((operation, public_id))
        if public_id in self.fail_ids:
            raise UpstreamError()

    async def add_tag(self, tag: str, public_id: str) -> Dict[str, Any]:
        self._record("add_tag", public_id)
        tags = self.resources[public_id]["tags"]
        if tag not in tags:
            tags.append(tag)
        return {"public_ids": [public_id]}

    async def remove_tag(self, tag: str, public_id: str) -> Dict[str, Any]:
        self._record("remove_tag", public_id)
        tags = self.resources[public_id]["tags"]
        if tag in tags:
            tags.remove(tag)
        return {"public_ids": [public_id]}

    async def destroy(self, public_id: str) -> Dict[str, Any]:
        self._record("destroy", public_id)
        if self.resources.pop(public_id, None) is None:
            return {"result": "not found"}
        return {"result": "ok"}


class FakeStoreProvider:
    def __init__(self, store: FakeMediaStore) -> None:
        self.store = store
        self.resolutions = 0

    @property
    def is_configured(self) -> bool:
        return True

    def get_store(self) -> FakeMediaStore:
        self.resolutions += 1
        return self.store


TOKENS = {
    "admin-token": {"uid": "admin-uid", "admin": True},
    "user-token": {"uid": "user-uid"},
    "truthy-token": {"uid": "truthy-uid", "admin": "yes"},
}


def fake_verify(token: str) -> Dict[str, Any]:
    if token == "expired-token":
        raise firebase_auth.ExpiredIdTokenError("Token expired", cause=None)
    if token not in TOKENS:
        raise ValueError("Could not verify token signature.")
    return dict(TOKENS[token])


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


ADMIN_HEADERS = {"Authorization": "Bearer admin-token"}
USER_HEADERS = {"Authorization": "Bearer user-token"}


@pytest.fixture()
def store() -> FakeMediaStore:
    return FakeMediaStore(
        [
            {
                "public_id": "events/fasching-2026/1",
                "secure_url": "https://res.cloudinary.com/demo/image/upload/events/fasching-2026/1.jpg",
                "created_at": "2026-02-14T19:00:00Z",
                "tags": ["approved"],
                "width": 1200,
                "height": 800,
            },
            {
                "public_id": "events/fasching-2026/2",
                "secure_url": "https://res.cloudinary.com/demo/image/upload/events/fasching-2026/2.jpg",
                "created_at": "2026-02-14T18:00:00Z",
                "tags": [],
                "width": 800,
                "height": 1200,
            },
        ]
    )


@pytest.fixture()
def provider(store: FakeMediaStore) -> FakeStoreProvider:
    return FakeStoreProvider(store)


@pytest.fixture()
def client(provider: FakeStoreProvider):
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from gallery_api.api.dependencies import get_auth_service, get_store_provider
    from gallery_api.main import app

    app.dependency_overrides[get_store_provider] = lambda: provider
    app.dependency_overrides[get_auth_service] = lambda: AuthService(verifier=fake_verify)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
