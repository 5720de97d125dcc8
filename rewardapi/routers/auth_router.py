from fastapi import APIRouter, Depends, status

from rewardapi.core.auth_middleware import get_current_active_user
from rewardapi.deps import get_auth_service
from rewardapi.schemas.auth import Token, UserCreate, UserLogin
from rewardapi.schemas.user import User as UserSchema, UserPublic
from rewardapi.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service),
) -> Token:
    """회원 가입 (가입 보너스 포인트 지급)"""
    return await auth_service.register(payload)


@router.post("/login", response_model=Token)
async def login(
    payload: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
) -> Token:
    return await auth_service.login(payload)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: UserSchema = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    """로그아웃 - 클라이언트는 보관 중인 토큰을 폐기해야 합니다"""
    await auth_service.logout(current_user)


@router.get("/me", response_model=UserPublic)
async def me(current_user: UserSchema = Depends(get_current_active_user)) -> UserPublic:
    return UserPublic.from_user(current_user)
