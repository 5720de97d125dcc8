from dependency_injector import containers, providers

from rewardapi.config import Settings, get_settings
from rewardapi.repositories.memory_store import MemoryRecordStore
from rewardapi.repositories.sql_store import SqlRecordStore
from rewardapi.repositories.store import RecordStore
from rewardapi.services.activity_log_service import ActivityLogService
from rewardapi.services.admin_service import AdminService
from rewardapi.services.approval_service import ApprovalService
from rewardapi.services.auth_service import AuthService
from rewardapi.services.claim_service import ClaimService
from rewardapi.services.reward_service import RewardService


def build_record_store(settings: Settings) -> RecordStore:
    """STORE_BACKEND 설정에 따라 저장소 백엔드 생성"""
    if settings.use_memory_store:
        return MemoryRecordStore()
    return SqlRecordStore.from_settings(settings)


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(get_settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Record store backend."""

    config = providers.DependenciesContainer()

    record_store = providers.Singleton(build_record_store, settings=config.config)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    activity_log_service = providers.Factory(
        ActivityLogService, store=repositories.record_store
    )
    claim_service = providers.Factory(
        ClaimService,
        store=repositories.record_store,
        activity_log_service=activity_log_service,
    )
    approval_service = providers.Factory(
        ApprovalService,
        store=repositories.record_store,
        activity_log_service=activity_log_service,
    )
    admin_service = providers.Factory(
        AdminService,
        store=repositories.record_store,
        activity_log_service=activity_log_service,
    )
    reward_service = providers.Factory(RewardService, store=repositories.record_store)
    auth_service = providers.Factory(
        AuthService,
        store=repositories.record_store,
        activity_log_service=activity_log_service,
        settings=config.config,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule, config=config)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
