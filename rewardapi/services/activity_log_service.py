import logging
from typing import List, Optional

from rewardapi.core.exceptions import ValidationError
from rewardapi.repositories.store import RecordStore
from rewardapi.schemas.activity_log import (
    ActivityLog,
    ActivityLogCreate,
    ActivityLogWithUser,
)
from rewardapi.schemas.user import UserPublic

logger = logging.getLogger(__name__)


class ActivityLogService:
    """활동 로그(감사 추적) 서비스 - append-only"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def append(self, entry: ActivityLogCreate) -> ActivityLog:
        """로그 한 건 추가

        행위자, 행위, 사유 코드가 모두 있어야 한다. 그 외 검증이나 부수효과는 없다.
        """
        missing = [
            field
            for field in ("user_id", "action", "code")
            if not getattr(entry, field)
        ]
        if missing:
            raise ValidationError(
                f"Activity log requires: {', '.join(missing)}",
                details={"missing": missing},
            )

        async with self.store.transaction() as session:
            log = await session.logs.append(entry)

        logger.debug(f"Activity log appended: {log.code} by user {log.user_id}")
        return log

    async def record(self, entry: ActivityLogCreate) -> Optional[ActivityLog]:
        """주 작업 이후의 best-effort 로그 기록 - 실패해도 예외를 올리지 않는다"""
        try:
            return await self.append(entry)
        except Exception:
            logger.exception(
                f"Failed to record activity log {entry.code} for user {entry.user_id}"
            )
            return None

    async def list_logs(self) -> List[ActivityLog]:
        async with self.store.transaction() as session:
            return await session.logs.find_all()

    async def list_logs_with_users(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[ActivityLogWithUser]:
        """행위자 정보를 포함한 최신순 로그 (관리자 대시보드)"""
        async with self.store.transaction() as session:
            logs = await session.logs.list_recent(limit=limit, offset=offset)
            users = {}
            for log in logs:
                if log.user_id not in users:
                    users[log.user_id] = await session.users.get(log.user_id)

        result = []
        for log in logs:
            user = users.get(log.user_id)
            result.append(
                ActivityLogWithUser(
                    **log.model_dump(),
                    user=UserPublic.from_user(user) if user else None,
                )
            )
        return result
