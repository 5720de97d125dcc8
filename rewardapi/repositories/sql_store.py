import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from sqlalchemy import func, select, text, update as sql_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from rewardapi.config import Settings
from rewardapi.core.exceptions import StorageError
from rewardapi.database.connection import create_engine_from_settings, create_session_factory
from rewardapi.models.activity_log import ActivityLog as ActivityLogModel
from rewardapi.models.base import Base
from rewardapi.models.rewards import Reward as RewardModel, UserRewardClaim as ClaimModel
from rewardapi.models.user import User as UserModel
from rewardapi.repositories.activity_log_repository import ActivityLogRepositoryMixin
from rewardapi.repositories.base import BaseRepository, SchemaType
from rewardapi.repositories.claim_repository import ClaimRepositoryMixin
from rewardapi.repositories.reward_repository import RewardRepositoryMixin
from rewardapi.repositories.store import RecordStore, StoreSession
from rewardapi.repositories.user_repository import UserRepositoryMixin
from rewardapi.utils.time_utils import next_timestamp, utcnow

logger = logging.getLogger(__name__)


class SqlRepository(BaseRepository[SchemaType]):
    """SQLAlchemy AsyncSession 기반 리포지토리"""

    model_class: Type[Any]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _column(self, field: str):
        column = self.model_class.__table__.columns.get(field)
        if column is None:
            raise ValueError(f"Unknown field for {self.model_class.__name__}: {field}")
        return column

    def _where(self, stmt, filters: Optional[Dict[str, Any]]):
        for field, value in (filters or {}).items():
            stmt = stmt.where(self._column(field) == self._plain(value))
        return stmt

    def _values(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        for field in fields:
            self._column(field)
        return self._plain_fields(fields)

    async def get(self, record_id: Any, for_update: bool = False) -> Optional[SchemaType]:
        stmt = select(self.model_class).where(self.model_class.id == record_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return self._to_schema(result.scalars().first())

    async def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        stmt = self._where(select(self.model_class), filters)

        if order_by:
            column = self._column(order_by)
            id_column = self.model_class.id
            if descending:
                stmt = stmt.order_by(column.desc(), id_column.desc())
            else:
                stmt = stmt.order_by(column.asc(), id_column.asc())

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return [self._to_schema(instance) for instance in result.scalars().all()]

    async def create(self, **fields) -> SchemaType:
        now = utcnow()
        instance = self.model_class(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **self._values(fields),
        )
        self.db.add(instance)
        await self.db.flush()
        return self._to_schema(instance)

    async def update(self, record_id: Any, **fields) -> Optional[SchemaType]:
        instance = await self.db.get(self.model_class, record_id, populate_existing=True)
        if instance is None:
            return None

        for field, value in self._values(fields).items():
            setattr(instance, field, value)
        instance.updated_at = next_timestamp(instance.updated_at)

        await self.db.flush()
        return self._to_schema(instance)

    async def update_if(
        self, record_id: Any, expected: Dict[str, Any], **fields
    ) -> Optional[SchemaType]:
        current = await self.get(record_id)
        if current is None:
            return None

        values = self._values(fields)
        values["updated_at"] = next_timestamp(current.updated_at)

        stmt = self._where(
            sql_update(self.model_class).where(self.model_class.id == record_id),
            expected,
        ).values(**values).execution_options(synchronize_session=False)

        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get(record_id)

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = self._where(select(func.count()).select_from(self.model_class), filters)
        result = await self.db.execute(stmt)
        return result.scalar_one()


class SqlUserRepository(SqlRepository, UserRepositoryMixin):
    model_class = UserModel


class SqlRewardRepository(SqlRepository, RewardRepositoryMixin):
    model_class = RewardModel


class SqlClaimRepository(SqlRepository, ClaimRepositoryMixin):
    model_class = ClaimModel


class SqlActivityLogRepository(SqlRepository, ActivityLogRepositoryMixin):
    model_class = ActivityLogModel


class SqlStoreSession(StoreSession):
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlUserRepository(db)
        self.rewards = SqlRewardRepository(db)
        self.claims = SqlClaimRepository(db)
        self.logs = SqlActivityLogRepository(db)


class SqlRecordStore(RecordStore):
    """PostgreSQL(asyncpg) / SQLite(aiosqlite) 저장소"""

    backend_name = "database"

    def __init__(self, engine: AsyncEngine, create_tables: bool = False):
        self.engine = engine
        self.create_tables_on_startup = create_tables
        self.session_factory = create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlRecordStore":
        return cls(
            create_engine_from_settings(settings),
            create_tables=settings.DB_CREATE_TABLES,
        )

    async def startup(self) -> None:
        if self.create_tables_on_startup:
            await self.create_tables()

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def shutdown(self) -> None:
        await self.engine.dispose()

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StorageError("Database is unreachable") from e
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreSession]:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    yield SqlStoreSession(session)
        except SQLAlchemyError as e:
            logger.error(f"Database transaction failed: {str(e)}")
            raise StorageError("Database operation failed") from e
