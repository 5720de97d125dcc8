from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rewardapi.core.exceptions import AuthenticationError, ForbiddenError
from rewardapi.deps import get_auth_service
from rewardapi.schemas.user import User as UserSchema
from rewardapi.services.auth_service import AuthService

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserSchema:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise AuthenticationError("Authentication required")
    return await auth_service.get_current_user(credentials.credentials)


async def get_current_active_user(
    current_user: UserSchema = Depends(get_current_user),
) -> UserSchema:
    """활성 사용자만 허용"""
    if not current_user.active:
        raise AuthenticationError("Inactive user account")
    return current_user


async def require_admin(
    current_user: UserSchema = Depends(get_current_active_user),
) -> UserSchema:
    """관리자 권한이 필요한 엔드포인트용 의존성"""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user
