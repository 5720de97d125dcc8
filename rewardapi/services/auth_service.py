import logging
import secrets

from rewardapi.config import Settings
from rewardapi.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
)
from rewardapi.core.password import hash_password, verify_password
from rewardapi.core.security import create_access_token, decode_access_token
from rewardapi.models.user import UserRole
from rewardapi.repositories.store import RecordStore
from rewardapi.schemas.activity_log import (
    ActivityAction,
    ActivityCode,
    ActivityLogCreate,
    LogData,
)
from rewardapi.schemas.auth import Token, UserCreate, UserLogin
from rewardapi.schemas.user import User as UserSchema, UserPublic
from rewardapi.services.activity_log_service import ActivityLogService

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(
        self,
        store: RecordStore,
        activity_log_service: ActivityLogService,
        settings: Settings,
    ):
        self.store = store
        self.activity_log_service = activity_log_service
        self.settings = settings

    def _check_admin_code(self, admin_code) -> None:
        expected = self.settings.ADMIN_REGISTRATION_CODE
        if not expected or not admin_code:
            raise ForbiddenError("Admin registration is not allowed")
        if not secrets.compare_digest(str(admin_code), expected):
            raise ForbiddenError("Invalid admin registration code")

    def _issue_token(self, user: UserSchema) -> Token:
        access_token = create_access_token({"sub": user.id}, self.settings)
        return Token(access_token=access_token, user=UserPublic.from_user(user))

    async def register(self, payload: UserCreate) -> Token:
        """회원 가입 - 가입 보너스 포인트 지급 후 토큰 발급"""
        is_admin = UserRole.is_admin(payload.role)
        if is_admin:
            self._check_admin_code(payload.admin_code)

        password_hash = hash_password(payload.password)
        async with self.store.transaction() as session:
            if await session.users.get_by_username(payload.username):
                raise ConflictError("Username already exists")
            if await session.users.get_by_email(payload.email):
                raise ConflictError("Email already registered")

            user = await session.users.create_user(
                fullname=payload.fullname,
                username=payload.username,
                email=payload.email,
                phone_number=payload.phone_number,
                password_hash=password_hash,
                is_admin=is_admin,
                points=self.settings.SIGNUP_BONUS_POINTS,
            )

        logger.info(f"User registered: {user.id} (admin={user.is_admin})")
        await self.activity_log_service.record(
            ActivityLogCreate(
                user_id=user.id,
                action=ActivityAction.REGISTER.value,
                code=ActivityCode.USER_REGISTERED.value,
                description=f"User {user.fullname} registered",
                data=LogData(user_id=user.id),
            )
        )
        return self._issue_token(user)

    async def login(self, payload: UserLogin) -> Token:
        async with self.store.transaction() as session:
            user = await session.users.get_by_username(payload.username)

        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning(f"Failed login attempt for username {payload.username}")
            raise AuthenticationError("Invalid username or password")
        if not user.active:
            raise AuthenticationError("Inactive user account")

        await self.activity_log_service.record(
            ActivityLogCreate(
                user_id=user.id,
                action=ActivityAction.LOGIN.value,
                code=ActivityCode.USER_LOGIN.value,
                description=f"User {user.fullname} logged in",
                data=LogData(user_id=user.id),
            )
        )
        return self._issue_token(user)

    async def logout(self, user: UserSchema) -> None:
        """토큰은 무상태이므로 로그아웃은 감사 로그만 남긴다"""
        await self.activity_log_service.record(
            ActivityLogCreate(
                user_id=user.id,
                action=ActivityAction.LOGOUT.value,
                code=ActivityCode.USER_LOGOUT.value,
                description=f"User {user.fullname} logged out",
                data=LogData(user_id=user.id),
            )
        )

    async def get_current_user(self, token: str) -> UserSchema:
        token_data = decode_access_token(token, self.settings)
        async with self.store.transaction() as session:
            user = await session.users.get(token_data.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user
