import time

import pytest
from jose import jwt

from conftest import JWT_SECRET
from divtrack.application.services.access_guard import AccessGuard
from divtrack.domain.errors import ConfigurationError, InvalidCredential, MissingCredential
from divtrack.infrastructure.auth.jwt_validator import SharedSecretTokenValidator


def make_token(secret=JWT_SECRET, expires_in=3600, **claims):
    payload = {"sub": "owner-1", "exp": int(time.time()) + expires_in, "aud": "authenticated"}
    payload.update(claims)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, secret, algorithm="HS256")


def guard(secret=JWT_SECRET, audience=None):
    return AccessGuard(SharedSecretTokenValidator(secret, audience))


def test_bearer_token_yields_subject():
    assert guard().authorize(f"Bearer {make_token()}") == "owner-1"


def test_bare_token_accepted():
    assert guard().authorize(make_token(sub="owner-9")) == "owner-9"


@pytest.mark.parametrize("credential", [None, "", "   ", "Bearer ", "Bearer    "])
def test_missing_credential(credential):
    with pytest.raises(MissingCredential):
        guard().authorize(credential)


def test_wrong_signature_is_invalid():
    with pytest.raises(InvalidCredential):
        guard().authorize(f"Bearer {make_token(secret='someone-else')}")


def test_expired_token_is_invalid():
    with pytest.raises(InvalidCredential, match="expired"):
        guard().authorize(f"Bearer {make_token(expires_in=-60)}")


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidCredential):
        guard().authorize("Bearer not.a.jwt")


def test_token_without_expiry_is_invalid():
    with pytest.raises(InvalidCredential):
        guard().authorize(f"Bearer {make_token(exp=None)}")


def test_token_without_subject_is_invalid():
    with pytest.raises(InvalidCredential):
        guard().authorize(f"Bearer {make_token(sub=None)}")


def test_missing_secret_is_configuration_error():
    with pytest.raises(ConfigurationError):
        guard(secret=None).authorize(f"Bearer {make_token()}")


def test_audience_checked_when_configured():
    assert guard(audience="authenticated").authorize(make_token()) == "owner-1"
    with pytest.raises(InvalidCredential):
        guard(audience="service_role").authorize(make_token())
