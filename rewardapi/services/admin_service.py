import logging
from typing import List, Optional

from rewardapi.models.rewards import ClaimStatusEnum
from rewardapi.repositories.store import RecordStore
from rewardapi.schemas.activity_log import ActivityLogWithUser
from rewardapi.schemas.admin import AdminStatsResponse
from rewardapi.services.activity_log_service import ActivityLogService

logger = logging.getLogger(__name__)


class AdminService:
    """관리자 대시보드 조회 서비스"""

    def __init__(self, store: RecordStore, activity_log_service: ActivityLogService):
        self.store = store
        self.activity_log_service = activity_log_service

    async def get_stats(self) -> AdminStatsResponse:
        async with self.store.transaction() as session:
            pending = await session.claims.count({"status": ClaimStatusEnum.PENDING})
            total_rewards = await session.rewards.count()
            total_claims = await session.claims.count()

        return AdminStatsResponse(
            pending_claim_count=pending,
            total_reward_count=total_rewards,
            total_claim_count=total_claims,
        )

    async def list_logs(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[ActivityLogWithUser]:
        return await self.activity_log_service.list_logs_with_users(
            limit=limit, offset=offset
        )
