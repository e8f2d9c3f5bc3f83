"""
Security module: bearer token authentication.
"""

from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    user_context_from_claims,
    get_bearer_token,
    current_user_context,
)

__all__ = [
    "sign_jwt",
    "verify_jwt",
    "user_context_from_claims",
    "get_bearer_token",
    "current_user_context",
]
