from typing import Optional

from pydantic import BaseModel, Field

from rewardapi.schemas.base import RecordSchema


class UserData(BaseModel):
    """사용자 속성 묶음"""

    is_admin: bool = False
    points: int = Field(0, ge=0)


class User(RecordSchema):
    """저장소 사용자 레코드 (비밀번호 해시 포함, 내부용)"""

    fullname: str
    username: str
    email: str
    phone_number: Optional[str] = None
    password_hash: str = Field(..., repr=False)
    active: bool = True
    data: UserData = Field(default_factory=UserData)
    version: int = 1

    @property
    def is_admin(self) -> bool:
        return self.data.is_admin

    @property
    def points(self) -> int:
        return self.data.points


class UserPublic(RecordSchema):
    """API 응답용 사용자 정보"""

    fullname: str
    username: str
    email: str
    phone_number: Optional[str] = None
    active: bool = True
    data: UserData = Field(default_factory=UserData)

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls.model_validate(user.model_dump())
