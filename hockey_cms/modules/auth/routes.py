from fastapi import APIRouter, Depends
from hockey_cms.core.dependencies import get_current_user
from hockey_cms.core.responses import envelope
from hockey_cms.modules.auth.schemas import CurrentUser
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Return the user behind the bearer token (used by the CMS header)."""
    return envelope(CurrentUser(**current_user))
