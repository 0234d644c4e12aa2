from auth.session import AuthState, Principal, Session, SessionError
from auth.identity import (
    HeaderIdentityProvider,
    IdentityError,
    IdentityProvider,
    sign_in,
)

__all__ = [
    "AuthState",
    "Principal",
    "Session",
    "SessionError",
    "HeaderIdentityProvider",
    "IdentityError",
    "IdentityProvider",
    "sign_in",
]
