from pydantic import BaseModel, Field


class AdminStatsResponse(BaseModel):
    """관리자 대시보드 집계"""

    pending_claim_count: int = Field(..., description="검토 대기 중인 교환 요청 수")
    total_reward_count: int = Field(..., description="카탈로그 리워드 수")
    total_claim_count: int = Field(..., description="전체 교환 요청 수")
