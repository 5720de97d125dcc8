import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from rewardapi.core.auth_middleware import require_admin
from rewardapi.deps import get_admin_service, get_approval_service, get_claim_service
from rewardapi.schemas.activity_log import ActivityLogWithUser
from rewardapi.schemas.admin import AdminStatsResponse
from rewardapi.schemas.pagination import PaginationLimits
from rewardapi.schemas.rewards import (
    ClaimDetail,
    ClaimStatusUpdateRequest,
    ClaimStatusUpdateResponse,
)
from rewardapi.schemas.user import User as UserSchema
from rewardapi.services.admin_service import AdminService
from rewardapi.services.approval_service import ApprovalService
from rewardapi.services.claim_service import ClaimService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/claims", response_model=List[ClaimDetail])
async def list_all_claims(
    _: UserSchema = Depends(require_admin),
    claim_service: ClaimService = Depends(get_claim_service),
) -> List[ClaimDetail]:
    """전체 교환 요청 (최신순)"""
    return await claim_service.list_all_claims()


@router.get("/claims/pending", response_model=List[ClaimDetail])
async def list_pending_claims(
    _: UserSchema = Depends(require_admin),
    claim_service: ClaimService = Depends(get_claim_service),
) -> List[ClaimDetail]:
    """검토 대기 중인 교환 요청"""
    return await claim_service.list_pending_claims()


@router.patch("/claims/{claim_id}", response_model=ClaimStatusUpdateResponse)
async def update_claim_status(
    request: ClaimStatusUpdateRequest,
    claim_id: str = Path(..., description="교환 요청 ID"),
    current_admin: UserSchema = Depends(require_admin),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> ClaimStatusUpdateResponse:
    """교환 요청 상태 변경 (승인/반려/지급 완료)"""
    claim = await approval_service.update_claim_status(
        claim_id, request.status, admin_id=current_admin.id
    )
    return ClaimStatusUpdateResponse(
        message="Reward status updated successfully", user_reward=claim
    )


@router.get("/logs", response_model=List[ActivityLogWithUser])
async def list_logs(
    limit: Optional[int] = Query(
        PaginationLimits.ACTIVITY_LOGS["default"],
        ge=PaginationLimits.ACTIVITY_LOGS["min"],
        le=PaginationLimits.ACTIVITY_LOGS["max"],
        description="조회할 로그 수",
    ),
    offset: int = Query(0, ge=0, description="건너뛸 로그 수 (최신순 기준)"),
    _: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> List[ActivityLogWithUser]:
    """활동 로그 (최신순, 행위자 정보 포함)"""
    return await admin_service.list_logs(limit=limit, offset=offset)


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    _: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStatsResponse:
    return await admin_service.get_stats()
