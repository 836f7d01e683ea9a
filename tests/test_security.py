import jwt
import pytest

from fintrack.core.config import AuthSettings
from fintrack.core.security import AuthenticatedUser, AuthenticationError, SecurityProvider


def test_issued_token_decodes_to_same_user() -> None:
    provider = SecurityProvider(AuthSettings(secret_key="test-secret-key-with-enough-length"))
    user = AuthenticatedUser(user_id="user-1", email="user@example.com")

    assert provider.decode_token(provider.issue_token(user)) == user


def test_expired_token_is_rejected() -> None:
    provider = SecurityProvider(AuthSettings(access_token_expire_minutes=-1))

    with pytest.raises(AuthenticationError, match="expired"):
        provider.decode_token(provider.issue_token(AuthenticatedUser(user_id="user-1")))


def test_token_signed_with_other_key_is_rejected() -> None:
    issuer = SecurityProvider(AuthSettings(secret_key="another-secret-key-of-decent-size"))
    verifier = SecurityProvider(AuthSettings(secret_key="test-secret-key-with-enough-length"))

    with pytest.raises(AuthenticationError, match="Invalid token"):
        verifier.decode_token(issuer.issue_token(AuthenticatedUser(user_id="user-1")))


def test_token_without_expiry_is_rejected() -> None:
    settings = AuthSettings(secret_key="test-secret-key-with-enough-length")
    token = jwt.encode({"sub": "user-1"}, settings.secret_key, algorithm=settings.algorithm)

    with pytest.raises(AuthenticationError):
        SecurityProvider(settings).decode_token(token)
