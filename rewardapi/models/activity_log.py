from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rewardapi.models.base import BaseModel


class ActivityLog(BaseModel):
    """
    사용자/관리자 활동 감사 로그

    가입, 로그인, 리워드 교환, 교환 상태 변경 등의 행위를 기록합니다.
    한번 생성된 레코드는 수정/삭제되지 않습니다 (append-only).
    """

    __tablename__ = "logs"
    __table_args__ = (Index("idx_logs_created_at", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, comment="행위자 ID"
    )
    code: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="사유 코드 (RWD_CLM, RWD_UPD 등)"
    )
    action: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="행위 (CLAIM, UPDATE 등)"
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict, comment="관련 식별자"
    )
