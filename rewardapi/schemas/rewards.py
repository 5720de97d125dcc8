from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rewardapi.models.rewards import ClaimStatusEnum
from rewardapi.schemas.base import RecordSchema
from rewardapi.schemas.user import User, UserPublic


class RewardData(BaseModel):
    """리워드 표시용 속성 묶음"""

    description: Optional[str] = Field(None, description="상품 설명")
    image_url: Optional[str] = Field(None, description="상품 이미지 URL")


class Reward(RecordSchema):
    """리워드 카탈로그 항목"""

    title: str = Field(..., description="상품명")
    points: int = Field(..., gt=0, description="필요 포인트")
    data: RewardData = Field(default_factory=RewardData)


class RewardCreate(BaseModel):
    """리워드 생성 (시드 데이터용)"""

    title: str = Field(..., min_length=1)
    points: int = Field(..., gt=0)
    data: RewardData = Field(default_factory=RewardData)


class ClaimData(BaseModel):
    """교환 요청 속성 묶음 - 신규 메타데이터는 추가 필드로 허용"""

    model_config = ConfigDict(extra="allow")

    claimed_at: Optional[datetime] = Field(None, description="교환 요청 시각")


class Claim(RecordSchema):
    """사용자 리워드 교환 요청 (UserRewardClaim)"""

    user_id: str
    reward_id: str
    status: ClaimStatusEnum
    data: ClaimData = Field(default_factory=ClaimData)


class ClaimResult(BaseModel):
    """교환 트랜잭션 결과 (서비스 내부용)"""

    claim: Claim
    user: User


class ClaimWithReward(Claim):
    """사용자 교환 내역 (리워드 정보 포함)"""

    reward: Optional[Reward] = None


class ClaimDetail(Claim):
    """관리자용 교환 내역 (사용자/리워드 정보 포함)"""

    user: Optional[UserPublic] = None
    reward: Optional[Reward] = None


class ClaimRewardRequest(BaseModel):
    """리워드 교환 요청"""

    reward_id: Optional[str] = Field(None, description="교환할 리워드 ID")


class ClaimRewardResponse(BaseModel):
    """리워드 교환 응답"""

    message: str
    user_reward: Claim
    user: UserPublic


class ClaimStatusUpdateRequest(BaseModel):
    """교환 상태 변경 요청 (관리자)"""

    status: str = Field(..., description="pending | approved | rejected | completed")


class ClaimStatusUpdateResponse(BaseModel):
    message: str
    user_reward: Claim


class RewardListResponse(BaseModel):
    rewards: List[Reward]
    total_count: int
