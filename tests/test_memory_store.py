import pytest

from rewardapi.repositories.memory_store import MemoryRecordStore
from rewardapi.schemas.rewards import RewardCreate


@pytest.fixture
def memory_store():
    return MemoryRecordStore()


class TestMemoryRecordStore:
    """인메모리 저장소 트랜잭션/조회 테스트"""

    async def test_exception_rolls_back_all_writes(self, memory_store):
        with pytest.raises(RuntimeError):
            async with memory_store.transaction() as session:
                await session.rewards.create_reward(RewardCreate(title="Mug", points=10))
                raise RuntimeError("boom")

        async with memory_store.transaction() as session:
            assert await session.rewards.count() == 0

    async def test_read_only_transaction_takes_no_snapshot(self, memory_store):
        async with memory_store.transaction() as session:
            await session.rewards.find_all()
            await session.users.get("missing")
            assert session.snapshot is None

            await session.rewards.create_reward(RewardCreate(title="Mug", points=10))
            assert session.snapshot is not None

    async def test_rollback_restores_state_before_first_write(self, memory_store):
        async with memory_store.transaction() as session:
            kept = await session.rewards.create_reward(RewardCreate(title="Mug", points=10))

        with pytest.raises(RuntimeError):
            async with memory_store.transaction() as session:
                await session.rewards.update(kept.id, title="Cup")
                await session.rewards.create_reward(RewardCreate(title="Pen", points=5))
                raise RuntimeError("boom")

        async with memory_store.transaction() as session:
            rewards = await session.rewards.find_all()
        assert [r.title for r in rewards] == ["Mug"]

    async def test_created_at_is_strictly_increasing(self, memory_store):
        async with memory_store.transaction() as session:
            created = [
                await session.logs.create(user_id="u", action="LOGIN", code="USER_LOGIN")
                for _ in range(50)
            ]

        stamps = [log.created_at for log in created]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))
        assert memory_store.last_created_at["logs"] == stamps[-1]

    async def test_returned_records_are_copies(self, memory_store):
        async with memory_store.transaction() as session:
            reward = await session.rewards.create_reward(RewardCreate(title="Mug", points=10))
            reward.data.description = "mutated"
            fetched = await session.rewards.get(reward.id)

        assert fetched.data.description is None

    async def test_unknown_id_returns_none(self, memory_store):
        async with memory_store.transaction() as session:
            assert await session.users.get("missing") is None
            assert await session.claims.update("missing", status="approved") is None

    async def test_unknown_filter_field_is_rejected(self, memory_store):
        async with memory_store.transaction() as session:
            with pytest.raises(ValueError):
                await session.rewards.find_all(filters={"colour": "red"})

    async def test_update_if_compares_expected_values(self, memory_store):
        store_user = await _user(memory_store)

        async with memory_store.transaction() as session:
            stale = await session.users.update_if(
                store_user.id, {"version": 99}, version=100
            )
            fresh = await session.users.update_if(
                store_user.id, {"version": 1}, version=2
            )

        assert stale is None
        assert fresh.version == 2
        assert fresh.updated_at > store_user.updated_at

    async def test_update_points_refuses_negative_balance(self, memory_store):
        store_user = await _user(memory_store)

        async with memory_store.transaction() as session:
            with pytest.raises(ValueError):
                await session.users.update_points(store_user, -1)

    async def test_find_all_orders_limits_and_offsets(self, memory_store):
        async with memory_store.transaction() as session:
            for points in (30, 10, 20):
                await session.rewards.create_reward(
                    RewardCreate(title=f"R{points}", points=points)
                )
            ascending = await session.rewards.find_all(order_by="points")
            page = await session.rewards.find_all(
                order_by="points", descending=True, limit=1, offset=1
            )

        assert [r.points for r in ascending] == [10, 20, 30]
        assert [r.points for r in page] == [20]


async def _user(memory_store):
    async with memory_store.transaction() as session:
        return await session.users.create_user(
            fullname="Ivy",
            username="ivy",
            email="ivy@example.com",
            password_hash="x",
            points=100,
        )
