from unittest.mock import patch

import pytest

from rewardapi.core.exceptions import AuthenticationError, ConflictError, ForbiddenError
from rewardapi.core.security import create_access_token
from rewardapi.models.user import UserRole
from rewardapi.schemas.auth import UserCreate, UserLogin


def _signup(username="hana", **overrides):
    payload = {
        "fullname": "Hana Kim",
        "username": username,
        "email": f"{username}@example.com",
        "password": "s3cret-pass",
    }
    payload.update(overrides)
    return UserCreate(**payload)


class TestRegister:
    async def test_register_grants_signup_bonus(self, auth_service, store):
        token = await auth_service.register(_signup())

        assert token.access_token
        assert token.user.data.points == 2450
        assert token.user.data.is_admin is False

        async with store.transaction() as session:
            user = await session.users.get_by_username("hana")
            logs = await session.logs.find_all(filters={"code": "USER_REG"})
        assert user.password_hash != "s3cret-pass"
        assert len(logs) == 1
        assert logs[0].user_id == user.id

    async def test_password_is_hashed_outside_store_transaction(self, auth_service, store):
        """해시 계산 중에는 저장소 잠금을 잡지 않는다"""
        lock_held = []

        def fake_hash(password):
            lock_held.append(store._lock.locked())
            return "hashed-" + password

        with patch("rewardapi.services.auth_service.hash_password", side_effect=fake_hash):
            await auth_service.register(_signup())

        assert lock_held == [False]
        async with store.transaction() as session:
            user = await session.users.get_by_username("hana")
        assert user.password_hash == "hashed-s3cret-pass"

    async def test_admin_email_does_not_make_admin(self, auth_service):
        token = await auth_service.register(
            _signup("ops", email="admin@example.com")
        )

        assert token.user.data.is_admin is False

    async def test_admin_role_requires_registration_code(self, auth_service, settings):
        with pytest.raises(ForbiddenError):
            await auth_service.register(_signup(role=UserRole.ADMIN, admin_code="wrong"))

        token = await auth_service.register(
            _signup(role=UserRole.ADMIN, admin_code=settings.ADMIN_REGISTRATION_CODE)
        )
        assert token.user.data.is_admin is True

    async def test_admin_signup_disabled_without_configured_code(
        self, auth_service, settings
    ):
        auth_service.settings = settings.model_copy(update={"ADMIN_REGISTRATION_CODE": ""})

        with pytest.raises(ForbiddenError):
            await auth_service.register(_signup(role=UserRole.ADMIN, admin_code=""))

    async def test_duplicate_username_conflicts(self, auth_service):
        await auth_service.register(_signup())

        with pytest.raises(ConflictError):
            await auth_service.register(_signup(email="other@example.com"))

    async def test_duplicate_email_conflicts(self, auth_service):
        await auth_service.register(_signup())

        with pytest.raises(ConflictError):
            await auth_service.register(_signup("hana2", email="hana@example.com"))


class TestLogin:
    async def test_login_returns_token_for_user(self, auth_service):
        await auth_service.register(_signup())

        token = await auth_service.login(UserLogin(username="hana", password="s3cret-pass"))
        user = await auth_service.get_current_user(token.access_token)

        assert user.username == "hana"

    async def test_wrong_password_is_rejected(self, auth_service):
        await auth_service.register(_signup())

        with pytest.raises(AuthenticationError):
            await auth_service.login(UserLogin(username="hana", password="nope"))

    async def test_unknown_user_is_rejected(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.login(UserLogin(username="ghost", password="x"))

    async def test_token_for_missing_user_is_rejected(self, auth_service, settings):
        token = create_access_token({"sub": "missing"}, settings)

        with pytest.raises(AuthenticationError):
            await auth_service.get_current_user(token)

    async def test_garbage_token_is_rejected(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.get_current_user("not-a-jwt")

    async def test_logout_is_logged(self, auth_service, store, user):
        await auth_service.logout(user)

        async with store.transaction() as session:
            logs = await session.logs.find_all(filters={"code": "USER_LOGOUT"})
        assert [log.user_id for log in logs] == [user.id]
