"""
리워드 카탈로그 시드 스크립트
카탈로그가 비어 있으면 기본 리워드 3종을 등록
"""

import asyncio
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rewardapi.config import get_settings
from rewardapi.repositories.sql_store import SqlRecordStore
from rewardapi.services.reward_service import RewardService


async def seed_rewards():
    store = SqlRecordStore.from_settings(get_settings())
    try:
        created = await RewardService(store).seed_initial_rewards()
        if not created:
            print("Reward catalog already has items, nothing to seed")
        for reward in created:
            print(f"  - {reward.title} ({reward.points} points)")
    finally:
        await store.shutdown()


if __name__ == "__main__":
    asyncio.run(seed_rewards())
