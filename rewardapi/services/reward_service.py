import logging
from typing import List

from rewardapi.core.exceptions import NotFoundError
from rewardapi.repositories.store import RecordStore
from rewardapi.schemas.rewards import Reward, RewardCreate, RewardData, RewardListResponse

logger = logging.getLogger(__name__)


INITIAL_REWARDS: List[RewardCreate] = [
    RewardCreate(
        title="1 Day Extra Leave",
        points=1000,
        data=RewardData(
            description="Get an extra day of leave",
            image_url="https://images.unsplash.com/photo-1569012871812-f38ee64cd54c",
        ),
    ),
    RewardCreate(
        title="$50 Amazon Voucher",
        points=500,
        data=RewardData(
            description="Gift card for online shopping",
            image_url="https://images.unsplash.com/photo-1523287562758-66c7fc58967f",
        ),
    ),
    RewardCreate(
        title="Team Lunch (Up to $200)",
        points=2000,
        data=RewardData(
            description="Treat your team to lunch",
            image_url=None,
        ),
    ),
]


class RewardService:
    """리워드 카탈로그 서비스"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def list_rewards(self) -> RewardListResponse:
        async with self.store.transaction() as session:
            rewards = await session.rewards.list_catalog()
        logger.info(f"Retrieved reward catalog with {len(rewards)} items")
        return RewardListResponse(rewards=rewards, total_count=len(rewards))

    async def get_reward(self, reward_id: str) -> Reward:
        async with self.store.transaction() as session:
            reward = await session.rewards.get(reward_id)
        if reward is None:
            raise NotFoundError("Reward not found", details={"reward_id": reward_id})
        return reward

    async def create_reward(self, reward: RewardCreate) -> Reward:
        async with self.store.transaction() as session:
            created = await session.rewards.create_reward(reward)
        logger.info(f"Created reward {created.id}: {created.title}")
        return created

    async def seed_initial_rewards(self) -> List[Reward]:
        """카탈로그가 비어 있을 때만 초기 리워드 등록"""
        async with self.store.transaction() as session:
            if await session.rewards.count() > 0:
                logger.info("Reward catalog already seeded, skipping")
                return []
            created = [
                await session.rewards.create_reward(reward) for reward in INITIAL_REWARDS
            ]

        logger.info(f"Seeded {len(created)} initial rewards")
        return created
