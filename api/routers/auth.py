"""Sign-in endpoints.

The gateway in front of the API performs the federated sign-in and
forwards identity headers; these routes only reflect that to the client
and make sure the member has a profile.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies import get_db, get_identity_provider, get_session
from api.schemas import SessionResponse
from auth import IdentityError, Session, sign_in
from database.db_manager import DatabaseManager
from models import UserProfile

router = APIRouter()


@router.post("/sign-in", response_model=UserProfile)
async def sign_in_route(
    request: Request,
    provider=Depends(get_identity_provider),
    db: DatabaseManager = Depends(get_db),
):
    """Verify the caller and create their profile on first sign-in."""
    try:
        return await sign_in(Session(), provider, request.headers, db.profiles)
    except IdentityError as e:
        raise HTTPException(401, str(e))


@router.get("/session", response_model=SessionResponse)
async def get_current_session(session: Session = Depends(get_session)):
    principal = session.principal
    return SessionResponse(
        state=session.state.value,
        uid=principal.uid if principal else None,
        display_name=principal.display_name if principal else None,
    )


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(session: Session = Depends(get_session)):
    if session.is_authenticated:
        session.sign_out()
    return SessionResponse(state=session.state.value)
