"""
레코드 저장소 인터페이스

서비스는 전역 DB 세션 대신 주입된 RecordStore를 통해서만 저장소에 접근한다.
하나의 transaction() 블록 안의 변경은 함께 커밋되거나 함께 롤백된다.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager

from rewardapi.repositories.activity_log_repository import ActivityLogRepositoryMixin
from rewardapi.repositories.claim_repository import ClaimRepositoryMixin
from rewardapi.repositories.reward_repository import RewardRepositoryMixin
from rewardapi.repositories.user_repository import UserRepositoryMixin


class StoreSession:
    """트랜잭션 단위로 묶인 엔티티별 리포지토리"""

    users: UserRepositoryMixin
    rewards: RewardRepositoryMixin
    claims: ClaimRepositoryMixin
    logs: ActivityLogRepositoryMixin


class RecordStore(ABC):
    backend_name: str = "unknown"

    @abstractmethod
    def transaction(self) -> AsyncContextManager[StoreSession]:
        """트랜잭션 컨텍스트 - 블록이 예외 없이 끝나면 커밋"""

    async def startup(self) -> None:
        """앱 시작 시 호출"""

    async def shutdown(self) -> None:
        """앱 종료 시 호출 (커넥션 정리)"""

    async def ping(self) -> bool:
        """헬스 체크용 연결 확인"""
        return True
