from typing import List

from rewardapi.repositories.base import BaseRepository
from rewardapi.schemas.rewards import Reward as RewardSchema, RewardCreate


class RewardRepositoryMixin(BaseRepository[RewardSchema]):
    """리워드 카탈로그 리포지토리"""

    schema_class = RewardSchema

    async def list_catalog(self) -> List[RewardSchema]:
        """필요 포인트 오름차순 카탈로그"""
        return await self.find_all(order_by="points")

    async def create_reward(self, reward: RewardCreate) -> RewardSchema:
        return await self.create(
            title=reward.title, points=reward.points, data=reward.data
        )
