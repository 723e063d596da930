"""Unit tests for auth/tokens.py -- bcrypt hashing and JWT encode/decode."""

import time

import pytest

from auth.tokens import create_access_token, decode_access_token, hash_password, password_fits, verify_password

_KEY = "unit-test-key-0123456789abcdef0123456789"


class TestPasswordHashing:
    def test_hash_verifies(self):
        hashed = hash_password("pw123", rounds=4)
        assert verify_password("pw123", hashed)

    def test_wrong_password_fails(self):
        hashed = hash_password("pw123", rounds=4)
        assert not verify_password("pw124", hashed)

    def test_same_password_gets_different_salts(self):
        assert hash_password("pw123", rounds=4) != hash_password("pw123", rounds=4)

    def test_rounds_are_encoded_in_hash(self):
        assert hash_password("pw123", rounds=5).startswith("$2b$05$")

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("pw123", "not-a-bcrypt-hash") is False

    def test_length_is_counted_in_utf8_bytes(self):
        assert password_fits("\u20ac" * 24)
        assert not password_fits("\u20ac" * 24 + "A")
        assert password_fits("a" * 72)

    def test_hash_refuses_password_over_72_bytes(self):
        with pytest.raises(ValueError, match="72 bytes"):
            hash_password("\u20ac" * 25, rounds=4)

    def test_verify_rejects_password_sharing_a_72_byte_prefix(self):
        hashed = hash_password("x" * 72, rounds=4)
        assert verify_password("x" * 72, hashed)
        assert not verify_password("x" * 72 + "y", hashed)


class TestAccessTokens:
    def test_round_trip_carries_identity(self):
        token = create_access_token(user_id=7, username="alice", secret_key=_KEY)
        payload = decode_access_token(token, _KEY)
        assert payload["id"] == 7
        assert payload["username"] == "alice"
        assert "exp" in payload

    def test_default_lifetime_is_one_hour(self):
        token = create_access_token(user_id=1, username="a", secret_key=_KEY)
        payload = decode_access_token(token, _KEY)
        remaining = payload["exp"] - time.time()
        assert 3500 < remaining <= 3600

    def test_expired_token_is_rejected(self):
        token = create_access_token(user_id=1, username="a", secret_key=_KEY, expire_seconds=-10)
        assert decode_access_token(token, _KEY) is None

    def test_wrong_key_is_rejected(self):
        token = create_access_token(user_id=1, username="a", secret_key=_KEY)
        assert decode_access_token(token, _KEY + "x") is None

    def test_garbage_is_rejected(self):
        assert decode_access_token("not.a.token", _KEY) is None
