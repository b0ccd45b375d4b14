"""
Operator accounts and the authorization capability used by triage and queries
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from safereport.auth.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from safereport.core.constants import OperatorRole
from safereport.core.exceptions import StoreError, Unauthorized, ValidationError
from safereport.database.models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class Operator:
    """An authenticated user allowed to triage reports."""
    id: int
    email: str
    name: Optional[str] = None
    role: OperatorRole = OperatorRole.OPERATOR

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["Operator"]:
        """Build an operator from a bearer token, or None if the token is not valid."""
        if not token:
            return None
        payload = decode_session_token(token)
        if payload is None:
            return None
        try:
            return cls(
                id=int(payload["sub"]),
                email=payload["email"],
                name=payload.get("name"),
                role=OperatorRole(payload.get("role", OperatorRole.OPERATOR.value)),
            )
        except (KeyError, ValueError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role.value}


def is_authenticated_operator(actor: Optional[Operator]) -> bool:
    """Capability check: does this actor hold a valid operator session?"""
    return isinstance(actor, Operator) and actor.role in (OperatorRole.OPERATOR, OperatorRole.ADMIN)


def require_operator(actor: Optional[Operator]) -> Operator:
    """Raise Unauthorized unless actor is an authenticated operator."""
    if not is_authenticated_operator(actor):
        raise Unauthorized()
    return actor


class OperatorService:
    """
    Registers operators and checks their credentials.
    """

    def __init__(self, session: Session):
        self.session = session

    def register(self, email: str, password: str, name: Optional[str] = None) -> Operator:
        """
        Create an operator account.

        Raises:
            ValidationError: bad email/password or email already registered
        """
        email = (email or "").strip().lower()
        if "@" not in email:
            raise ValidationError("A valid email is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=(name or "").strip() or None,
            role=OperatorRole.OPERATOR,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValidationError("Email already registered") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to register operator: {e}")
            raise StoreError() from e

        logger.info(f"Registered operator {user.id}")
        return self._to_operator(user)

    def authenticate(self, email: str, password: str) -> Operator:
        """
        Check credentials.

        Raises:
            Unauthorized: unknown email or wrong password (same message for both)
        """
        email = (email or "").strip().lower()
        try:
            user = self.session.execute(
                select(User).where(User.email == email)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load operator: {e}")
            raise StoreError() from e

        if user is None or not verify_password(password or "", user.password_hash):
            raise Unauthorized("Invalid credentials")

        return self._to_operator(user)

    def issue_token(self, operator: Operator) -> str:
        return create_session_token(
            user_id=operator.id,
            email=operator.email,
            name=operator.name,
            role=operator.role.value,
        )

    @staticmethod
    def _to_operator(user: User) -> Operator:
        return Operator(id=user.id, email=user.email, name=user.name, role=user.role)
