from typing import Optional

from rewardapi.repositories.base import BaseRepository
from rewardapi.schemas.user import User as UserSchema, UserData


class UserRepositoryMixin(BaseRepository[UserSchema]):
    """사용자 리포지토리 - 백엔드 공통 조회/잔액 갱신"""

    schema_class = UserSchema

    async def get_by_username(self, username: str) -> Optional[UserSchema]:
        """사용자명으로 조회"""
        users = await self.find_all(filters={"username": username}, limit=1)
        return users[0] if users else None

    async def get_by_email(self, email: str) -> Optional[UserSchema]:
        """이메일로 조회"""
        users = await self.find_all(filters={"email": email}, limit=1)
        return users[0] if users else None

    async def create_user(
        self,
        fullname: str,
        username: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
        points: int = 0,
        phone_number: Optional[str] = None,
    ) -> UserSchema:
        """로컬 사용자 생성"""
        return await self.create(
            fullname=fullname,
            username=username,
            email=email,
            phone_number=phone_number,
            password_hash=password_hash,
            active=True,
            data=UserData(is_admin=is_admin, points=points),
            version=1,
        )

    async def update_points(self, user: UserSchema, points: int) -> Optional[UserSchema]:
        """포인트 잔액 갱신 (version 기반 compare-and-swap)

        읽은 이후 다른 요청이 잔액을 바꿨다면 None을 반환한다.
        """
        if points < 0:
            raise ValueError(f"Points balance cannot be negative: {points}")

        data = user.data.model_copy(update={"points": points})
        return await self.update_if(
            user.id,
            {"version": user.version},
            data=data,
            version=user.version + 1,
        )
