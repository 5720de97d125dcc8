import logging

from rewardapi.core.exceptions import NotFoundError, ValidationError
from rewardapi.models.rewards import ClaimStatusEnum
from rewardapi.repositories.store import RecordStore
from rewardapi.schemas.activity_log import (
    ActivityAction,
    ActivityCode,
    ActivityLogCreate,
    LogData,
)
from rewardapi.schemas.rewards import Claim
from rewardapi.services.activity_log_service import ActivityLogService

logger = logging.getLogger(__name__)


class ApprovalService:
    """관리자 교환 요청 승인/반려 워크플로우

    관리자 권한은 라우터의 require_admin에서 확인한다. 상태 간 전이 제한은 없고,
    반려되더라도 포인트는 환원하지 않는다.
    """

    def __init__(self, store: RecordStore, activity_log_service: ActivityLogService):
        self.store = store
        self.activity_log_service = activity_log_service

    @staticmethod
    def parse_status(status: str) -> ClaimStatusEnum:
        try:
            return ClaimStatusEnum(status)
        except ValueError:
            allowed = [s.value for s in ClaimStatusEnum]
            raise ValidationError(
                f"Invalid status: {status}", details={"allowed": allowed}
            )

    async def update_claim_status(
        self, claim_id: str, new_status: str, admin_id: str
    ) -> Claim:
        """교환 요청 상태 변경 후 UPDATE 로그 기록"""
        status = self.parse_status(new_status)

        async with self.store.transaction() as session:
            claim = await session.claims.get(claim_id)
            if claim is None:
                raise NotFoundError("User reward not found")

            updated = await session.claims.set_status(claim.id, status)
            admin = await session.users.get(admin_id)
            claimant = await session.users.get(claim.user_id)
            reward = await session.rewards.get(claim.reward_id)

        logger.info(
            f"Admin {admin_id} changed claim {claim.id} status "
            f"{claim.status.value} -> {status.value}"
        )

        admin_name = admin.fullname if admin else admin_id
        claimant_name = claimant.fullname if claimant else claim.user_id
        reward_title = reward.title if reward else claim.reward_id
        await self.activity_log_service.record(
            ActivityLogCreate(
                user_id=admin_id,
                action=ActivityAction.UPDATE.value,
                code=ActivityCode.REWARD_UPDATED.value,
                description=(
                    f"Admin {admin_name} updated status to {status.value} "
                    f"for {claimant_name}'s claim of {reward_title}"
                ),
                data=LogData(
                    admin_id=admin_id,
                    user_id=claim.user_id,
                    reward_id=claim.reward_id,
                    user_reward_id=claim.id,
                    status=status.value,
                ),
            )
        )

        return updated
