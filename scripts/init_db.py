import asyncio
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rewardapi.config import get_settings
from rewardapi.repositories.sql_store import SqlRecordStore


async def init_db():
    """데이터베이스 테이블 생성"""
    settings = get_settings()
    store = SqlRecordStore.from_settings(settings)
    try:
        await store.create_tables()
        print(f"Database initialized successfully: {store.engine.url.render_as_string()}")
    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise
    finally:
        await store.shutdown()


if __name__ == "__main__":
    asyncio.run(init_db())
