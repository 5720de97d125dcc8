import enum
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rewardapi.models.base import BaseModel


class ClaimStatusEnum(str, enum.Enum):
    PENDING = "pending"  # 교환 요청 (관리자 검토 대기)
    APPROVED = "approved"  # 승인
    REJECTED = "rejected"  # 반려
    COMPLETED = "completed"  # 지급 완료


class Reward(BaseModel):
    __tablename__ = "rewards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    # {"description": str, "image_url": str}
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class UserRewardClaim(BaseModel):
    __tablename__ = "users_rewards"
    __table_args__ = (
        Index("idx_users_rewards_user", "user_id"),
        Index("idx_users_rewards_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    reward_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rewards.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=ClaimStatusEnum.PENDING.value
    )
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
