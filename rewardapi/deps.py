from fastapi import Request

from rewardapi.containers import Container
from rewardapi.services.activity_log_service import ActivityLogService
from rewardapi.services.admin_service import AdminService
from rewardapi.services.approval_service import ApprovalService
from rewardapi.services.auth_service import AuthService
from rewardapi.services.claim_service import ClaimService
from rewardapi.services.reward_service import RewardService


def get_container(request: Request) -> Container:
    return request.app.container


def get_activity_log_service(request: Request) -> ActivityLogService:
    return get_container(request).services.activity_log_service()


def get_claim_service(request: Request) -> ClaimService:
    return get_container(request).services.claim_service()


def get_approval_service(request: Request) -> ApprovalService:
    return get_container(request).services.approval_service()


def get_admin_service(request: Request) -> AdminService:
    return get_container(request).services.admin_service()


def get_reward_service(request: Request) -> RewardService:
    return get_container(request).services.reward_service()


def get_auth_service(request: Request) -> AuthService:
    return get_container(request).services.auth_service()
