from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from cabinshare.config import settings
from cabinshare.core.cache import TTLCache
from cabinshare.core.exceptions import UnauthorizedException
from cabinshare.core.security import extract_current_user
from cabinshare.database import get_db
from cabinshare.models.current_user import CurrentUser
from cabinshare.repositories.user_roles_repository import UserRolesRepository

security = HTTPBearer()

# Created once per process and shared by every request's role store.
role_cache = TTLCache(ttl_seconds=settings.ROLE_CACHE_TTL_SECONDS)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency to validate JWT and identify the caller.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Take the caller id from the 'sub' claim

    Caller-asserted ids in paths or bodies are never used as the caller's
    identity.

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        return extract_current_user(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_role_cache() -> TTLCache:
    """FastAPI dependency returning the process-wide role cache"""
    return role_cache


def get_role_store(
    db: Session = Depends(get_db), cache: TTLCache = Depends(get_role_cache)
) -> UserRolesRepository:
    """FastAPI dependency for the role store accessor bound to this request's session"""
    return UserRolesRepository(db, cache)
