import pytest
import pytest_asyncio

from rewardapi.config import Settings
from rewardapi.repositories.memory_store import MemoryRecordStore
from rewardapi.schemas.rewards import RewardCreate, RewardData
from rewardapi.services.activity_log_service import ActivityLogService
from rewardapi.services.admin_service import AdminService
from rewardapi.services.approval_service import ApprovalService
from rewardapi.services.auth_service import AuthService
from rewardapi.services.claim_service import ClaimService
from rewardapi.services.reward_service import RewardService


@pytest.fixture
def settings():
    """테스트 설정 (인메모리 저장소)"""
    return Settings(
        _env_file=None,
        STORE_BACKEND="memory",
        SECRET_KEY="test-secret-key",
        ADMIN_REGISTRATION_CODE="test-admin-code",
        SEED_INITIAL_REWARDS=True,
    )


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def activity_log_service(store):
    return ActivityLogService(store)


@pytest.fixture
def claim_service(store, activity_log_service):
    return ClaimService(store, activity_log_service)


@pytest.fixture
def approval_service(store, activity_log_service):
    return ApprovalService(store, activity_log_service)


@pytest.fixture
def admin_service(store, activity_log_service):
    return AdminService(store, activity_log_service)


@pytest.fixture
def reward_service(store):
    return RewardService(store)


@pytest.fixture
def auth_service(store, activity_log_service, settings):
    return AuthService(store, activity_log_service, settings)


async def create_user(store, username, points, is_admin=False):
    async with store.transaction() as session:
        return await session.users.create_user(
            fullname=username.title(),
            username=username,
            email=f"{username}@example.com",
            password_hash="not-a-real-hash",
            is_admin=is_admin,
            points=points,
        )


async def create_reward(store, title, points):
    async with store.transaction() as session:
        return await session.rewards.create_reward(
            RewardCreate(title=title, points=points, data=RewardData(description=title))
        )


@pytest_asyncio.fixture
async def user(store):
    """2450 포인트를 가진 일반 사용자"""
    return await create_user(store, "alice", 2450)


@pytest_asyncio.fixture
async def admin(store):
    return await create_user(store, "boss", 0, is_admin=True)


@pytest_asyncio.fixture
async def voucher(store):
    return await create_reward(store, "$50 Amazon Voucher", 500)


@pytest_asyncio.fixture
async def team_lunch(store):
    return await create_reward(store, "Team Lunch (Up to $200)", 2000)


@pytest.fixture
def make_user(store):
    async def _make(username, points, is_admin=False):
        return await create_user(store, username, points, is_admin=is_admin)

    return _make


@pytest.fixture
def make_reward(store):
    async def _make(title, points):
        return await create_reward(store, title, points)

    return _make
