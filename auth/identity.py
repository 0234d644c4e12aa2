import logging
from typing import Mapping, Optional, Protocol

from auth.session import Principal, Session
from models import UserProfile

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"
USER_NAME_HEADER = "x-user-name"
USER_PHOTO_HEADER = "x-user-photo"


class IdentityError(Exception):
    """The credential could not be turned into a principal."""


class IdentityProvider(Protocol):
    """Interface for whatever vouches for the caller.

    Implementors check the credential and return who it belongs to,
    or raise IdentityError.
    """

    async def verify(self, credential: Mapping[str, str]) -> Principal:
        ...


class ProfileStore(Protocol):
    """The slice of the profile repository sign-in needs."""

    async def ensure_profile(
        self, uid: str, name: str, photo_url: Optional[str] = None
    ) -> UserProfile:
        ...


class HeaderIdentityProvider:
    """Trusts identity headers set by the gateway in front of the API.

    The gateway has already done the federated sign-in; we only read
    X-User-Id, X-User-Name and X-User-Photo off the request.
    """

    async def verify(self, credential: Mapping[str, str]) -> Principal:
        headers = {k.lower(): v for k, v in credential.items()}
        uid = (headers.get(USER_ID_HEADER) or "").strip()
        if not uid:
            raise IdentityError("Missing X-User-Id header")
        name = (headers.get(USER_NAME_HEADER) or "").strip()
        photo = (headers.get(USER_PHOTO_HEADER) or "").strip() or None
        return Principal(uid=uid, display_name=name or uid, photo_url=photo)


async def sign_in(
    session: Session,
    provider: IdentityProvider,
    credential: Mapping[str, str],
    profiles: ProfileStore,
) -> UserProfile:
    """Run one sign-in attempt through the session lifecycle.

    The member's profile is created the first time they sign in.
    On failure the session ends up FAILED and the error is re-raised.
    """
    session.begin()
    try:
        principal = await provider.verify(credential)
    except IdentityError as e:
        session.fail(str(e))
        raise

    profile = await profiles.ensure_profile(
        principal.uid, principal.display_name, principal.photo_url
    )
    session.succeed(principal)
    logger.info("Signed in %s", principal.uid)
    return profile
