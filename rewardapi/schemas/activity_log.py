"""
활동 로그 관련 Pydantic 스키마

사용자/관리자 행위 감사 추적을 위한 스키마 정의
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from rewardapi.schemas.base import RecordSchema
from rewardapi.schemas.user import UserPublic


class ActivityAction(str, Enum):
    """행위 타입 정의"""
    REGISTER = "REGISTER"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CLAIM = "CLAIM"
    UPDATE = "UPDATE"


class ActivityCode(str, Enum):
    """사유 코드"""
    USER_REGISTERED = "USER_REG"
    USER_LOGIN = "USER_LOGIN"
    USER_LOGOUT = "USER_LOGOUT"
    REWARD_CLAIMED = "RWD_CLM"
    REWARD_UPDATED = "RWD_UPD"


class LogData(BaseModel):
    """로그 페이로드 - 관련 식별자"""

    model_config = ConfigDict(extra="allow")

    user_id: Optional[str] = None
    reward_id: Optional[str] = None
    user_reward_id: Optional[str] = None
    admin_id: Optional[str] = None
    status: Optional[str] = None


class ActivityLogCreate(BaseModel):
    """활동 로그 생성 요청 스키마"""
    user_id: Optional[str] = None
    action: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    data: LogData = Field(default_factory=LogData)


class ActivityLog(RecordSchema):
    """활동 로그 응답 스키마"""
    user_id: str
    action: str
    code: str
    description: Optional[str] = None
    data: LogData = Field(default_factory=LogData)


class ActivityLogWithUser(ActivityLog):
    """행위자 정보가 포함된 활동 로그 (관리자 대시보드용)"""
    user: Optional[UserPublic] = None
