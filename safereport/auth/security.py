"""
Password hashing and session tokens for operators
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from safereport.core.config import settings

logger = logging.getLogger(__name__)

TOKEN_TYPE = "operator"


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a bcrypt hash

    Args:
        password: Plain text password
        hashed_password: Hashed password string

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_session_token(
    user_id: int,
    email: str,
    name: Optional[str],
    role: str,
    ttl_minutes: Optional[int] = None,
) -> str:
    """Issue a signed bearer token for an operator."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "role": role,
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes or settings.session_ttl_minutes),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a bearer token; None when invalid, expired or not an operator token."""
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
        )
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected session token: {e}")
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None
    return payload
