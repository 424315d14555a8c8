import pytest
from fastapi.security import HTTPAuthorizationCredentials
from firebase_admin import exceptions as firebase_exceptions

from gallery_api.services.auth_service import AuthPrincipal, AuthService
from gallery_api.utils.errors import ForbiddenError, UnauthenticatedError
from conftest import bearer, fake_verify


@pytest.fixture()
def auth():
    return AuthService(verifier=fake_verify)


@pytest.mark.parametrize(
    "credentials",
    [
        None,
        HTTPAuthorizationCredentials(scheme="Token", credentials="admin-token"),
        bearer(""),
        bearer("   "),
    ],
)
def test_missing_or_malformed_credentials_are_unauthenticated(auth, credentials):
    with pytest.raises(UnauthenticatedError) as excinfo:
        auth.authorize_admin(credentials)

    assert excinfo.value.message == "Missing or invalid authorization header"


@pytest.mark.parametrize("token", ["expired-token", "forged-token"])
def test_verification_failures_collapse_to_one_message(auth, token):
    with pytest.raises(UnauthenticatedError) as excinfo:
        auth.authorize_admin(bearer(token))

    assert excinfo.value.message == "Invalid authentication token"
    assert excinfo.value.status_code == 403


def test_unreachable_provider_is_unauthenticated():
    def unreachable(token):
        raise firebase_exceptions.UnavailableError("certificate endpoint down", cause=None)

    with pytest.raises(UnauthenticatedError):
        AuthService(verifier=unreachable).authorize_admin(bearer("admin-token"))


def test_non_admin_is_forbidden(auth):
    with pytest.raises(ForbiddenError):
        auth.authorize_admin(bearer("user-token"))


def test_admin_claim_must_be_true(auth):
    with pytest.raises(ForbiddenError):
        auth.authorize_admin(bearer("truthy-token"))


def test_admin_returns_subject(auth):
    assert auth.authorize_admin(bearer("admin-token")) == "admin-uid"


def test_scheme_is_case_insensitive(auth):
    credentials = HTTPAuthorizationCredentials(scheme="bearer", credentials="admin-token")

    assert auth.authorize_admin(credentials) == "admin-uid"


def test_authenticate_resolves_principal(auth):
    assert auth.authenticate(bearer("user-token")) == AuthPrincipal(subject_id="user-uid", is_admin=False)


def test_custom_admin_claim_name():
    service = AuthService(verifier=lambda token: {"uid": "u1", "moderator": True}, admin_claim="moderator")

    assert service.authorize_admin(bearer("anything")) == "u1"


def test_verifier_is_called_for_every_request():
    calls = []

    def counting(token):
        calls.append(token)
        return fake_verify(token)

    service = AuthService(verifier=counting)
    service.authorize_admin(bearer("admin-token"))
    service.authorize_admin(bearer("admin-token"))

    assert calls == ["admin-token", "admin-token"]
