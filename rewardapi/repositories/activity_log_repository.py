from typing import List, Optional

from rewardapi.repositories.base import BaseRepository
from rewardapi.schemas.activity_log import ActivityLog as ActivityLogSchema, ActivityLogCreate


class ActivityLogRepositoryMixin(BaseRepository[ActivityLogSchema]):
    """활동 로그 리포지토리 (append-only)"""

    schema_class = ActivityLogSchema

    async def append(self, entry: ActivityLogCreate) -> ActivityLogSchema:
        return await self.create(
            user_id=entry.user_id,
            action=entry.action,
            code=entry.code,
            description=entry.description,
            data=entry.data,
        )

    async def list_recent(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[ActivityLogSchema]:
        """최신순 로그 조회"""
        return await self.find_all(
            order_by="created_at", descending=True, limit=limit, offset=offset
        )
