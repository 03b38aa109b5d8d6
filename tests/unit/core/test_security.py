"""
Unit Tests for Security Module
Tests for: password hashing, legacy password matching, JWT tokens, mock tokens
"""
import pytest
from unittest.mock import patch
from datetime import timedelta
from jose import jwt

from staffhub.core.config import settings
from staffhub.core.exceptions import InvalidCredentialError
from staffhub.core.security import (
    create_access_token,
    create_mock_token,
    create_user_token,
    decode_token,
    get_password_hash,
    is_mock_token,
    parse_mock_token,
    password_matches,
    verify_password,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        hashed = get_password_hash("testpassword123")

        assert hashed != "testpassword123"
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Test that hashing same password returns different hashes"""
        # Bcrypt generates different salts
        assert get_password_hash("testpassword123") != get_password_hash("testpassword123")

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_against_non_hash(self):
        """A plain stored value is not a bcrypt hash"""
        assert verify_password("secret", "not-a-hash") is False


class TestPasswordMatches:
    """Stored passwords may be plain text or bcrypt"""

    def test_plain_text_match(self):
        assert password_matches("password123", "password123") is True

    def test_plain_text_mismatch(self):
        assert password_matches("password123", "password124") is False

    def test_bcrypt_match(self):
        assert password_matches("password123", get_password_hash("password123")) is True

    @pytest.mark.parametrize("stored", [None, ""])
    def test_missing_stored_password(self, stored):
        assert password_matches("password123", stored) is False


class TestAccessTokens:
    """Test JWT issue and verification"""

    def test_user_token_claims(self):
        token = create_user_token({
            "id": 42,
            "email": "ada@example.com",
            "role": "admin",
            "fullName": "Ada Lovelace",
            "position": "Director",
            "password": "never-in-token",
        })

        claims = decode_token(token)

        assert claims["id"] == "42"
        assert claims["email"] == "ada@example.com"
        assert claims["role"] == "admin"
        assert claims["fullName"] == "Ada Lovelace"
        assert claims["position"] == "Director"
        assert claims["type"] == "access"
        assert "password" not in claims

    def test_expired_token_rejected(self):
        token = create_access_token({"id": "1"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidCredentialError):
            decode_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"id": "1", "type": "access"}, "another-secret", algorithm="HS256")

        with pytest.raises(InvalidCredentialError) as exc_info:
            decode_token(token)

        assert exc_info.value.message == "Invalid or expired token"
        assert exc_info.value.status_code == 403

    def test_wrong_token_type_rejected(self):
        token = jwt.encode(
            {"id": "1", "type": "refresh"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(InvalidCredentialError):
            decode_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidCredentialError):
            decode_token("definitely.not.jwt")


class TestMockTokens:
    """Legacy mock_token_<id>_<timestamp> credentials"""

    def test_round_trip(self):
        token = create_mock_token("17")

        assert is_mock_token(token)
        assert parse_mock_token(token) == "17"

    def test_id_is_third_segment(self):
        assert parse_mock_token("mock_token_abc_123_extra") == "abc"

    @pytest.mark.parametrize("token", ["mock_token_", "mock_token__123"])
    def test_empty_id_rejected(self, token):
        with pytest.raises(InvalidCredentialError) as exc_info:
            parse_mock_token(token)

        assert exc_info.value.message == "Invalid mock token"

    def test_regular_jwt_is_not_mock(self):
        assert is_mock_token(create_access_token({"id": "1"})) is False

    def test_mock_tokens_can_be_disabled(self):
        with patch.object(settings, "ALLOW_MOCK_TOKENS", False):
            assert is_mock_token("mock_token_1_123") is False
