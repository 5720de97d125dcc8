import logging
from typing import List

from fastapi import APIRouter, Depends, Path, status

from rewardapi.core.auth_middleware import get_current_active_user
from rewardapi.deps import get_claim_service, get_reward_service
from rewardapi.schemas.rewards import (
    ClaimRewardRequest,
    ClaimRewardResponse,
    ClaimWithReward,
    Reward,
    RewardListResponse,
)
from rewardapi.schemas.user import User as UserSchema, UserPublic
from rewardapi.services.claim_service import ClaimService
from rewardapi.services.reward_service import RewardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=RewardListResponse)
async def list_rewards(
    reward_service: RewardService = Depends(get_reward_service),
) -> RewardListResponse:
    """리워드 카탈로그 조회"""
    return await reward_service.list_rewards()


@router.post(
    "/claim", response_model=ClaimRewardResponse, status_code=status.HTTP_201_CREATED
)
async def claim_reward(
    request: ClaimRewardRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    claim_service: ClaimService = Depends(get_claim_service),
) -> ClaimRewardResponse:
    """리워드 교환

    포인트를 차감하고 관리자 검토 대기(pending) 상태의 교환 요청을 생성합니다.
    """
    result = await claim_service.claim_reward(current_user.id, request.reward_id)
    return ClaimRewardResponse(
        message="Reward claimed successfully",
        user_reward=result.claim,
        user=UserPublic.from_user(result.user),
    )


@router.get("/my-claims", response_model=List[ClaimWithReward])
async def list_my_claims(
    current_user: UserSchema = Depends(get_current_active_user),
    claim_service: ClaimService = Depends(get_claim_service),
) -> List[ClaimWithReward]:
    """내 교환 내역 (최신순)"""
    return await claim_service.list_user_claims(current_user.id)


@router.get("/{reward_id}", response_model=Reward)
async def get_reward(
    reward_id: str = Path(..., description="리워드 ID"),
    reward_service: RewardService = Depends(get_reward_service),
) -> Reward:
    return await reward_service.get_reward(reward_id)
