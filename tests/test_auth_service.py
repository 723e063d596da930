"""Unit tests for auth/service.py -- AuthService register/login use cases.

The coroutines are driven with asyncio.run(); run_in_threadpool works under
any running asyncio loop, so no async test plugin is needed.

Covers:
- Construction requires a signing key
- register_user: success, presence checks, conflict from the store
- login_user: success, presence checks, unknown user, wrong password
- Issued tokens are signed with the injected key and carry the stored identity
- get_user_for_token: valid, forged, and stale-user tokens
"""

import asyncio
from unittest.mock import patch

import pytest

from auth.errors import AuthError, ConflictError, NotFoundError, ValidationError
from auth.models import User
from auth.service import AuthService
from auth.tokens import create_access_token, decode_access_token

_KEY = "service-test-key-0123456789abcdef012345"


@pytest.fixture
def svc(store):
    return AuthService(store, secret_key=_KEY, token_expire_seconds=3600, bcrypt_rounds=4)


def _register(svc, username="alice", password="pw123", firstname="A", lastname="L"):
    return asyncio.run(svc.register_user(username, password, firstname, lastname))


def _login(svc, username, password):
    return asyncio.run(svc.login_user(username, password))


class TestConstruction:
    def test_empty_secret_rejected(self, store):
        with pytest.raises(ValueError):
            AuthService(store, secret_key="")


class TestRegisterUser:
    def test_returns_user_and_token(self, svc):
        result = _register(svc)
        assert result.user.id is not None
        assert result.user.username == "alice"
        assert result.token

    def test_stores_hash_not_plaintext(self, svc, store):
        _register(svc, password="pw123")
        stored = store.get_by_username("alice")
        assert stored.password != "pw123"
        assert stored.password.startswith("$2b$04$")

    @pytest.mark.parametrize(
        "fields",
        [
            (None, "pw", "A", "L"),
            ("u", None, "A", "L"),
            ("u", "pw", None, "L"),
            ("u", "pw", "A", None),
            ("", "pw", "A", "L"),
        ],
    )
    def test_missing_field_raises_validation_error(self, svc, store, fields):
        with patch.object(store, "create_user") as create_user:
            with pytest.raises(ValidationError, match="All fields are required."):
                asyncio.run(svc.register_user(*fields))
        create_user.assert_not_called()

    def test_password_over_byte_limit_is_rejected_before_hashing(self, svc, store):
        with patch.object(store, "create_user") as create_user:
            with pytest.raises(ValidationError, match="at most 72 bytes"):
                _register(svc, password="\u00e9" * 37)
        create_user.assert_not_called()

    def test_duplicate_raises_conflict(self, svc):
        _register(svc)
        with pytest.raises(ConflictError):
            _register(svc, password="different")

    def test_token_carries_stored_identity(self, svc, store):
        result = _register(svc)
        claims = decode_access_token(result.token, _KEY)
        stored = store.get_by_username("alice")
        assert claims["id"] == stored.id
        assert claims["username"] == "alice"

    def test_to_dict_omits_password(self, svc):
        body = _register(svc).to_dict()
        assert set(body) == {"user", "token"}
        assert "password" not in body["user"]


class TestLoginUser:
    def test_correct_password(self, svc):
        registered = _register(svc)
        result = _login(svc, "alice", "pw123")
        assert result.user.id == registered.user.id
        assert decode_access_token(result.token, _KEY)["username"] == "alice"

    def test_wrong_password(self, svc):
        _register(svc)
        with pytest.raises(AuthError) as exc_info:
            _login(svc, "alice", "wrong")
        assert exc_info.value.status_code == 400

    def test_unknown_user(self, svc):
        with pytest.raises(NotFoundError) as exc_info:
            _login(svc, "nobody", "pw")
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("username,password", [(None, "pw"), ("alice", None), ("", ""), ("alice", "")])
    def test_missing_field(self, svc, username, password):
        with pytest.raises(ValidationError, match="Username and password are required."):
            _login(svc, username, password)

    def test_password_over_byte_limit_is_rejected(self, svc):
        _register(svc, password="p" * 72)
        with pytest.raises(ValidationError, match="at most 72 bytes"):
            _login(svc, "alice", "p" * 72 + "q")

    def test_token_is_not_signed_with_another_key(self, svc):
        _register(svc)
        token = _login(svc, "alice", "pw123").token
        assert decode_access_token(token, "some-other-key-0123456789abcdef01234567") is None


class TestGetUserForToken:
    def test_valid_token(self, svc):
        token = _register(svc).token
        user = asyncio.run(svc.get_user_for_token(token))
        assert user.username == "alice"

    def test_forged_signature(self, svc):
        registered = _register(svc)
        header, payload, _sig = registered.token.split(".")
        forged_sig = create_access_token(
            user_id=registered.user.id, username="alice", secret_key="attacker-key-0123456789abcdef0123456789"
        ).split(".")[2]
        assert asyncio.run(svc.get_user_for_token(f"{header}.{payload}.{forged_sig}")) is None

    def test_token_for_missing_user(self, svc):
        orphan = svc.issue_token(User(username="ghost", password="x", firstname="G", lastname="H", id=4242))
        assert asyncio.run(svc.get_user_for_token(orphan)) is None
