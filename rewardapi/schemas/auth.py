from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from rewardapi.models.user import UserRole
from rewardapi.schemas.user import UserPublic


class UserCreate(BaseModel):
    """회원 가입 요청

    관리자 역할은 가입 시 명시적으로 선택하고, 관리자 가입 코드로 검증한다.
    """

    fullname: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: Optional[str] = Field(None, max_length=255)
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.USER
    admin_code: Optional[str] = Field(None, description="관리자 가입 코드")

    @field_validator("username", "fullname")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Field cannot be empty")
        return v.strip()


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1, description="Username is required")
    password: str = Field(..., min_length=1, description="Password is required")


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic


class TokenData(BaseModel):
    user_id: Optional[str] = None
