"""
인메모리 레코드 저장소

테스트와 STORE_BACKEND=memory 실행용. 트랜잭션은 asyncio.Lock으로 직렬화되고,
블록에서 예외가 발생하면 첫 쓰기 직전에 떠 둔 스냅샷으로 되돌린다.
"""

import asyncio
import copy
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from rewardapi.repositories.activity_log_repository import ActivityLogRepositoryMixin
from rewardapi.repositories.base import BaseRepository, SchemaType
from rewardapi.repositories.claim_repository import ClaimRepositoryMixin
from rewardapi.repositories.reward_repository import RewardRepositoryMixin
from rewardapi.repositories.store import RecordStore, StoreSession
from rewardapi.repositories.user_repository import UserRepositoryMixin
from rewardapi.utils.time_utils import next_timestamp

Table = Dict[str, Dict[str, Any]]


class MemoryRepository(BaseRepository[SchemaType]):
    """dict 테이블 기반 리포지토리 - 레코드는 스키마로 검증된 dict로 보관"""

    def __init__(self, session: "MemoryStoreSession", name: str):
        self.session = session
        self.name = name
        self.table: Table = session.store.tables[name]

    def _check_fields(self, fields) -> None:
        for field in fields:
            if field not in self.schema_class.model_fields:
                raise ValueError(
                    f"Unknown field for {self.schema_class.__name__}: {field}"
                )

    def _normalize(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.schema_class.model_validate(record).model_dump()

    def _matches(self, record: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        return all(
            record.get(field) == self._plain(value)
            for field, value in (filters or {}).items()
        )

    async def get(self, record_id: Any, for_update: bool = False) -> Optional[SchemaType]:
        record = self.table.get(record_id)
        return self._to_schema(copy.deepcopy(record))

    async def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        self._check_fields(filters or {})
        records = [r for r in self.table.values() if self._matches(r, filters)]

        if order_by:
            self._check_fields([order_by])
            records.sort(key=lambda r: (r[order_by], r["id"]), reverse=descending)

        start = offset or 0
        end = start + limit if limit is not None else None
        return [self._to_schema(copy.deepcopy(r)) for r in records[start:end]]

    async def create(self, **fields) -> SchemaType:
        self._check_fields(fields)
        self.session.before_write()
        # 같은 테이블 안에서 생성 시각이 겹치지 않게 한다
        now = next_timestamp(self.session.store.last_created_at.get(self.name))
        self.session.store.last_created_at[self.name] = now
        record = self._normalize(
            {
                **self._plain_fields(fields),
                "id": str(uuid.uuid4()),
                "created_at": now,
                "updated_at": now,
            }
        )
        self.table[record["id"]] = record
        return self._to_schema(copy.deepcopy(record))

    async def update(self, record_id: Any, **fields) -> Optional[SchemaType]:
        self._check_fields(fields)
        record = self.table.get(record_id)
        if record is None:
            return None

        self.session.before_write()
        merged = {**record, **self._plain_fields(fields)}
        merged["updated_at"] = next_timestamp(record["updated_at"])
        record = self._normalize(merged)
        self.table[record_id] = record
        return self._to_schema(copy.deepcopy(record))

    async def update_if(
        self, record_id: Any, expected: Dict[str, Any], **fields
    ) -> Optional[SchemaType]:
        self._check_fields(expected)
        record = self.table.get(record_id)
        if record is None or not self._matches(record, expected):
            return None
        return await self.update(record_id, **fields)

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        self._check_fields(filters or {})
        return sum(1 for r in self.table.values() if self._matches(r, filters))


class MemoryUserRepository(MemoryRepository, UserRepositoryMixin):
    pass


class MemoryRewardRepository(MemoryRepository, RewardRepositoryMixin):
    pass


class MemoryClaimRepository(MemoryRepository, ClaimRepositoryMixin):
    pass


class MemoryActivityLogRepository(MemoryRepository, ActivityLogRepositoryMixin):
    pass


class MemoryStoreSession(StoreSession):
    """트랜잭션 하나의 리포지토리 묶음 - 첫 쓰기 직전에만 스냅샷을 뜬다"""

    def __init__(self, store: "MemoryRecordStore"):
        self.store = store
        self.snapshot: Optional[Dict[str, Table]] = None
        self.users = MemoryUserRepository(self, "users")
        self.rewards = MemoryRewardRepository(self, "rewards")
        self.claims = MemoryClaimRepository(self, "claims")
        self.logs = MemoryActivityLogRepository(self, "logs")

    def before_write(self) -> None:
        if self.snapshot is None:
            self.snapshot = copy.deepcopy(self.store.tables)

    def rollback(self) -> None:
        if self.snapshot is None:
            return
        for name, table in self.store.tables.items():
            table.clear()
            table.update(self.snapshot[name])


class MemoryRecordStore(RecordStore):
    backend_name = "memory"

    def __init__(self):
        self.tables: Dict[str, Table] = {
            "users": {},
            "rewards": {},
            "claims": {},
            "logs": {},
        }
        # 테이블별 마지막 생성 시각 (롤백되어도 되돌리지 않는다)
        self.last_created_at: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreSession]:
        async with self._lock:
            session = MemoryStoreSession(self)
            try:
                yield session
            except BaseException:
                session.rollback()
                raise
