from datetime import datetime
from typing import List, Optional

from rewardapi.models.rewards import ClaimStatusEnum
from rewardapi.repositories.base import BaseRepository
from rewardapi.schemas.rewards import Claim as ClaimSchema, ClaimData


class ClaimRepositoryMixin(BaseRepository[ClaimSchema]):
    """사용자 리워드 교환 요청 리포지토리"""

    schema_class = ClaimSchema

    async def create_claim(
        self, user_id: str, reward_id: str, claimed_at: datetime
    ) -> ClaimSchema:
        """대기(pending) 상태의 교환 요청 생성"""
        return await self.create(
            user_id=user_id,
            reward_id=reward_id,
            status=ClaimStatusEnum.PENDING,
            data=ClaimData(claimed_at=claimed_at),
        )

    async def set_status(
        self, claim_id: str, status: ClaimStatusEnum
    ) -> Optional[ClaimSchema]:
        return await self.update(claim_id, status=status)

    async def find_by_user(self, user_id: str) -> List[ClaimSchema]:
        """사용자 교환 내역 (최신순)"""
        return await self.find_all(
            filters={"user_id": user_id}, order_by="created_at", descending=True
        )

    async def find_pending(self) -> List[ClaimSchema]:
        """검토 대기 중인 교환 요청 (요청 순)"""
        return await self.find_all(
            filters={"status": ClaimStatusEnum.PENDING}, order_by="created_at"
        )

    async def find_recent(self) -> List[ClaimSchema]:
        return await self.find_all(order_by="created_at", descending=True)
