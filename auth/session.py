from enum import Enum
from pydantic import BaseModel
from typing import Optional


class AuthState(str, Enum):
    """Where a sign-in attempt stands."""
    UNAUTHENTICATED = "unauthenticated"
    PENDING = "pending"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class Principal(BaseModel):
    """Who the identity provider says the caller is."""
    uid: str
    display_name: str
    photo_url: Optional[str] = None


class SessionError(Exception):
    """Illegal session transition, or a signed-in user was required."""


_ALLOWED = {
    AuthState.UNAUTHENTICATED: {AuthState.PENDING},
    AuthState.PENDING: {AuthState.AUTHENTICATED, AuthState.FAILED},
    AuthState.AUTHENTICATED: {AuthState.UNAUTHENTICATED},
    AuthState.FAILED: {AuthState.PENDING, AuthState.UNAUTHENTICATED},
}


class Session:
    """The caller's sign-in state, handed explicitly to whatever needs it.

    unauthenticated -> pending -> authenticated | failed
    A failed session may retry (back to pending); signing out resets it.
    """

    def __init__(self):
        self.state = AuthState.UNAUTHENTICATED
        self.principal: Optional[Principal] = None
        self.error: Optional[str] = None

    def __repr__(self) -> str:
        uid = self.principal.uid if self.principal else None
        return f"Session(state={self.state.value}, uid={uid})"

    def _move(self, new_state: AuthState) -> None:
        if new_state not in _ALLOWED[self.state]:
            raise SessionError(
                f"Cannot go from {self.state.value} to {new_state.value}"
            )
        self.state = new_state

    def begin(self) -> None:
        self._move(AuthState.PENDING)
        self.error = None

    def succeed(self, principal: Principal) -> None:
        self._move(AuthState.AUTHENTICATED)
        self.principal = principal
        self.error = None

    def fail(self, message: str) -> None:
        self._move(AuthState.FAILED)
        self.principal = None
        self.error = message

    def sign_out(self) -> None:
        self._move(AuthState.UNAUTHENTICATED)
        self.principal = None
        self.error = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def require_user(self) -> Principal:
        """The signed-in principal, or SessionError."""
        if not self.is_authenticated or self.principal is None:
            raise SessionError("User must be logged in")
        return self.principal
