from typing import Optional

from fastapi import Depends, HTTPException, Request

from api.config import Settings, get_settings
from auth import HeaderIdentityProvider, IdentityError, Principal, Session, SessionError
from database.db_manager import DatabaseManager
from places import Geocoder, GoogleGeocoder


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_identity_provider(request: Request):
    provider = getattr(request.app.state, "identity_provider", None)
    return provider or HeaderIdentityProvider()


async def get_session(request: Request, provider=Depends(get_identity_provider)) -> Session:
    """Per-request session built from the gateway's identity headers.

    Requests without identity headers get an unauthenticated session.
    """
    session = Session()
    session.begin()
    try:
        session.succeed(await provider.verify(request.headers))
    except IdentityError as e:
        session.fail(str(e))
        session.sign_out()
    return session


def require_principal(session: Session = Depends(get_session)) -> Principal:
    try:
        return session.require_user()
    except SessionError as e:
        raise HTTPException(401, str(e))


def get_geocoder(
    request: Request, settings: Settings = Depends(get_settings)
) -> Optional[Geocoder]:
    geocoder = getattr(request.app.state, "geocoder", None)
    if geocoder is not None:
        return geocoder
    if not settings.google_maps_api_key:
        return None
    return GoogleGeocoder(settings.google_maps_api_key)
