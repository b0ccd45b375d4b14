"""
Tests for operator accounts and session tokens
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

import sys
sys.path.insert(0, '.')

from safereport.auth.operators import (
    Operator,
    OperatorService,
    is_authenticated_operator,
    require_operator,
)
from safereport.auth.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from safereport.core.config import settings
from safereport.core.constants import OperatorRole
from safereport.core.exceptions import Unauthorized, ValidationError


class TestPasswordHashing:
    """Test suite for bcrypt password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("correct-horse-battery")
        assert hashed != "correct-horse-battery"
        assert verify_password("correct-horse-battery", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestSessionTokens:
    """Test suite for operator session tokens."""

    def test_round_trip(self):
        token = create_session_token(7, "op@example.com", "Op", "OPERATOR")
        payload = decode_session_token(token)

        assert payload["sub"] == "7"
        assert payload["email"] == "op@example.com"
        assert payload["type"] == "operator"

    def test_expired_token(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "7", "email": "op@example.com", "type": "operator",
             "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
            settings.session_secret,
            algorithm=settings.session_algorithm,
        )
        assert decode_session_token(token) is None

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "7", "email": "op@example.com", "type": "operator"},
            "some-other-secret-that-is-long-enough",
            algorithm="HS256",
        )
        assert decode_session_token(token) is None

    def test_wrong_token_type(self):
        token = jwt.encode(
            {"sub": "7", "email": "op@example.com", "type": "refresh"},
            settings.session_secret,
            algorithm=settings.session_algorithm,
        )
        assert decode_session_token(token) is None

    def test_garbage(self):
        assert decode_session_token("not.a.token") is None


class TestOperatorCapability:
    """Test suite for the operator capability check."""

    def test_operator_from_token(self):
        token = create_session_token(3, "op@example.com", None, "ADMIN")
        operator = Operator.from_token(token)

        assert operator == Operator(id=3, email="op@example.com", role=OperatorRole.ADMIN)
        assert is_authenticated_operator(operator)

    def test_missing_token(self):
        assert Operator.from_token(None) is None
        assert Operator.from_token("") is None

    def test_require_operator(self):
        with pytest.raises(Unauthorized):
            require_operator(None)
        with pytest.raises(Unauthorized):
            require_operator({"id": 1, "email": "x@example.com"})

        operator = Operator(id=1, email="x@example.com")
        assert require_operator(operator) is operator


class TestOperatorService:
    """Test suite for registration and login."""

    def test_register_and_authenticate(self, session):
        service = OperatorService(session)
        registered = service.register(" Op@Example.com ", "correct-horse-battery", "Op")

        operator = service.authenticate("op@example.com", "correct-horse-battery")

        assert operator.id == registered.id
        assert operator.email == "op@example.com"
        assert operator.role == OperatorRole.OPERATOR

    def test_duplicate_email(self, session, operator):
        with pytest.raises(ValidationError) as exc_info:
            OperatorService(session).register("operator@example.com", "another-password")
        assert exc_info.value.message == "Email already registered"

    def test_short_password(self, session):
        with pytest.raises(ValidationError):
            OperatorService(session).register("op@example.com", "short")

    def test_password_too_long_for_bcrypt(self, session):
        with pytest.raises(ValidationError):
            OperatorService(session).register("op@example.com", "x" * 73)

    def test_invalid_email(self, session):
        with pytest.raises(ValidationError):
            OperatorService(session).register("not-an-email", "correct-horse-battery")

    def test_wrong_password(self, session, operator):
        with pytest.raises(Unauthorized) as exc_info:
            OperatorService(session).authenticate("operator@example.com", "wrong-password")
        assert exc_info.value.message == "Invalid credentials"

    def test_unknown_email(self, session):
        with pytest.raises(Unauthorized):
            OperatorService(session).authenticate("nobody@example.com", "whatever-password")

    def test_issued_token_identifies_operator(self, session, operator):
        token = OperatorService(session).issue_token(operator)
        assert Operator.from_token(token) == operator
