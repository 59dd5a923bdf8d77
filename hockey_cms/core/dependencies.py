"""
Core dependencies for route protection
"""

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from hockey_cms.config import settings
from hockey_cms.database.supabase_client import get_supabase
from hockey_cms.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the bearer token to a user; 401 when absent or invalid"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_service.get_current_user(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but a missing token yields None. A bad token is still rejected."""
    if credentials is None or not credentials.credentials:
        return None
    return auth_service.get_current_user(credentials.credentials)


def require_editor(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Guard for CMS routes. Any valid user may edit; enforcement is toggled by admin_auth_required."""
    if settings.admin_auth_required:
        return get_current_user(credentials, auth_service)
    return get_optional_user(credentials, auth_service)


def require_job_runner(x_job_token: Optional[str] = Header(None)) -> None:
    """Trusted-caller check for the job processor (cron, worker) when job_runner_token is configured"""
    expected = settings.job_runner_token
    if expected and x_job_token != expected:
        logger.warning("Rejected job processing call with missing or wrong X-Job-Token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid job runner token"
        )
