import logging
from typing import Dict, List, Optional

from rewardapi.core.exceptions import (
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from rewardapi.repositories.store import RecordStore, StoreSession
from rewardapi.schemas.activity_log import (
    ActivityAction,
    ActivityCode,
    ActivityLogCreate,
    LogData,
)
from rewardapi.schemas.rewards import (
    Claim,
    ClaimDetail,
    ClaimResult,
    ClaimWithReward,
    Reward,
)
from rewardapi.schemas.user import User, UserPublic
from rewardapi.services.activity_log_service import ActivityLogService
from rewardapi.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class ClaimService:
    """리워드 교환 트랜잭션 및 교환 내역 조회"""

    def __init__(self, store: RecordStore, activity_log_service: ActivityLogService):
        self.store = store
        self.activity_log_service = activity_log_service

    async def claim_reward(self, user_id: str, reward_id: Optional[str]) -> ClaimResult:
        """리워드 교환

        교환 요청 생성과 포인트 차감은 하나의 트랜잭션에서 함께 커밋된다.
        잔액 갱신은 사용자 version 기반 CAS이며, 경합에서 지면 ConflictError로
        전체가 롤백된다. CLAIM 로그는 커밋 이후 best-effort로 남긴다.

        Args:
            user_id: 교환을 요청한 사용자 ID
            reward_id: 교환할 리워드 ID

        Returns:
            ClaimResult: 생성된 교환 요청과 차감 후 사용자
        """
        if reward_id is None or not str(reward_id).strip():
            raise ValidationError("Reward ID is required")

        async with self.store.transaction() as session:
            user = await session.users.get(user_id, for_update=True)
            reward = await session.rewards.get(reward_id)
            if user is None or reward is None:
                raise NotFoundError("User or reward not found")

            if user.points < reward.points:
                raise InsufficientBalanceError(
                    "Not enough points to claim this reward",
                    details={"required": reward.points, "available": user.points},
                )

            claim = await session.claims.create_claim(
                user_id=user.id, reward_id=reward.id, claimed_at=utcnow()
            )
            updated_user = await session.users.update_points(
                user, user.points - reward.points
            )
            if updated_user is None:
                raise ConflictError(
                    "Points balance changed during claim, please retry",
                    details={"user_id": user.id},
                )

        logger.info(
            f"User {user.id} claimed reward {reward.id} "
            f"({reward.points} points, balance {updated_user.points})"
        )

        await self.activity_log_service.record(
            ActivityLogCreate(
                user_id=user.id,
                action=ActivityAction.CLAIM.value,
                code=ActivityCode.REWARD_CLAIMED.value,
                description=f"User {user.fullname} claimed {reward.title}",
                data=LogData(
                    user_id=user.id,
                    reward_id=reward.id,
                    user_reward_id=claim.id,
                ),
            )
        )

        return ClaimResult(claim=claim, user=updated_user)

    async def list_user_claims(self, user_id: str) -> List[ClaimWithReward]:
        """사용자 교환 내역 (리워드 정보 포함, 최신순)"""
        async with self.store.transaction() as session:
            claims = await session.claims.find_by_user(user_id)
            rewards = await self._load_rewards(session, claims)

        return [
            ClaimWithReward(**claim.model_dump(), reward=rewards.get(claim.reward_id))
            for claim in claims
        ]

    async def list_pending_claims(self) -> List[ClaimDetail]:
        """검토 대기 중인 교환 요청 (관리자)"""
        async with self.store.transaction() as session:
            claims = await session.claims.find_pending()
            return await self._with_details(session, claims)

    async def list_all_claims(self) -> List[ClaimDetail]:
        """전체 교환 요청 (관리자, 최신순)"""
        async with self.store.transaction() as session:
            claims = await session.claims.find_recent()
            return await self._with_details(session, claims)

    async def _load_rewards(
        self, session: StoreSession, claims: List[Claim]
    ) -> Dict[str, Reward]:
        rewards: Dict[str, Reward] = {}
        for claim in claims:
            if claim.reward_id not in rewards:
                reward = await session.rewards.get(claim.reward_id)
                if reward:
                    rewards[claim.reward_id] = reward
        return rewards

    async def _with_details(
        self, session: StoreSession, claims: List[Claim]
    ) -> List[ClaimDetail]:
        rewards = await self._load_rewards(session, claims)
        users: Dict[str, Optional[User]] = {}
        for claim in claims:
            if claim.user_id not in users:
                users[claim.user_id] = await session.users.get(claim.user_id)

        details = []
        for claim in claims:
            user = users.get(claim.user_id)
            details.append(
                ClaimDetail(
                    **claim.model_dump(),
                    user=UserPublic.from_user(user) if user else None,
                    reward=rewards.get(claim.reward_id),
                )
            )
        return details
