"""
SafeReport - Auth Module
Operator credentials, session tokens and the operator capability check.
"""

from safereport.auth.security import (
    hash_password,
    verify_password,
    create_session_token,
    decode_session_token,
)
from safereport.auth.operators import (
    Operator,
    OperatorService,
    is_authenticated_operator,
    require_operator,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_session_token",
    "decode_session_token",
    "Operator",
    "OperatorService",
    "is_authenticated_operator",
    "require_operator",
]
