"""Profile API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from api.dependencies import get_db, require_principal
from auth import Principal
from database.db_manager import DatabaseManager
from models import GolfValidationError, ProfileUpdate, UserProfile

router = APIRouter()


@router.get("", response_model=List[UserProfile])
async def list_profiles(db: DatabaseManager = Depends(get_db)):
    """Everyone in the group, by name."""
    return await db.profiles.list_profiles()


@router.get("/me", response_model=UserProfile)
async def get_my_profile(
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    profile = await db.profiles.get_profile(principal.uid)
    if not profile:
        raise HTTPException(404, "Profile not found")
    return profile


@router.put("/me", response_model=UserProfile)
async def update_my_profile(
    req: ProfileUpdate,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Edit name, home course and handicap. The name cannot be blank."""
    try:
        fields = req.to_fields()
    except GolfValidationError as e:
        raise HTTPException(400, str(e))

    updated = await db.profiles.update_profile(principal.uid, **fields)
    if not updated:
        raise HTTPException(404, "Profile not found")
    return updated


@router.get("/{uid}", response_model=UserProfile)
async def get_profile(uid: str, db: DatabaseManager = Depends(get_db)):
    profile = await db.profiles.get_profile(uid)
    if not profile:
        raise HTTPException(404, "Profile not found")
    return profile
