import asyncio

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from rewardapi.containers import Container
from rewardapi.main import create_app
from rewardapi.schemas.activity_log import ActivityLogCreate, LogData
from rewardapi.services.activity_log_service import ActivityLogService

API = "/api/v1"


@pytest.fixture
def client(settings, store):
    """인메모리 저장소를 주입한 테스트 클라이언트 (lifespan에서 카탈로그 시드)"""
    container = Container()
    container.config.config.override(providers.Object(settings))
    container.repositories.record_store.override(providers.Object(store))
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


def _register(client, username, admin_code=None):
    payload = {
        "fullname": username.title(),
        "username": username,
        "email": f"{username}@example.com",
        "password": "pw-" + username,
    }
    if admin_code:
        payload.update(role="admin", admin_code=admin_code)
    response = client.post(f"{API}/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def user_headers(client):
    return _register(client, "alice")


@pytest.fixture
def admin_headers(client, settings):
    return _register(client, "boss", admin_code=settings.ADMIN_REGISTRATION_CODE)


def _reward_id(client, title):
    rewards = client.get(f"{API}/rewards").json()["rewards"]
    return next(r["id"] for r in rewards if r["title"] == title)


class TestHealthRoutes:
    def test_health_reports_store(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["store_backend"] == "memory"
        assert response.json()["store_reachable"] is True
        assert response.headers["X-Request-ID"]


class TestRewardRoutes:
    """리워드 라우터 테스트"""

    def test_catalog_is_seeded_on_startup(self, client):
        response = client.get(f"{API}/rewards")

        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 3
        assert [r["points"] for r in data["rewards"]] == [500, 1000, 2000]

    def test_get_reward(self, client):
        reward_id = _reward_id(client, "1 Day Extra Leave")

        response = client.get(f"{API}/rewards/{reward_id}")

        assert response.status_code == 200
        assert response.json()["points"] == 1000

    def test_get_unknown_reward(self, client):
        response = client.get(f"{API}/rewards/missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_001"

    def test_claim_reward(self, client, user_headers):
        reward_id = _reward_id(client, "$50 Amazon Voucher")

        response = client.post(
            f"{API}/rewards/claim", json={"reward_id": reward_id}, headers=user_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Reward claimed successfully"
        assert data["user_reward"]["status"] == "pending"
        assert data["user_reward"]["reward_id"] == reward_id
        assert data["user"]["data"]["points"] == 1950
        assert "password_hash" not in data["user"]

        claims = client.get(f"{API}/rewards/my-claims", headers=user_headers).json()
        assert len(claims) == 1
        assert claims[0]["reward"]["title"] == "$50 Amazon Voucher"

    def test_claim_requires_authentication(self, client):
        response = client.post(f"{API}/rewards/claim", json={"reward_id": "x"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_claim_without_reward_id(self, client, user_headers):
        response = client.post(f"{API}/rewards/claim", json={}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Reward ID is required"

    def test_claim_unknown_reward(self, client, user_headers):
        response = client.post(
            f"{API}/rewards/claim", json={"reward_id": "missing"}, headers=user_headers
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "User or reward not found"

    def test_claim_with_insufficient_balance(self, client, user_headers):
        reward_id = _reward_id(client, "Team Lunch (Up to $200)")
        first = client.post(
            f"{API}/rewards/claim", json={"reward_id": reward_id}, headers=user_headers
        )
        second = client.post(
            f"{API}/rewards/claim", json={"reward_id": reward_id}, headers=user_headers
        )

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"]["code"] == "BALANCE_001"
        me = client.get(f"{API}/auth/me", headers=user_headers).json()
        assert me["data"]["points"] == 450


class TestAdminRoutes:
    def _claim(self, client, headers, title="$50 Amazon Voucher"):
        reward_id = _reward_id(client, title)
        response = client.post(
            f"{API}/rewards/claim", json={"reward_id": reward_id}, headers=headers
        )
        return response.json()["user_reward"]["id"]

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/admin/claims"),
            ("get", "/admin/claims/pending"),
            ("get", "/admin/logs"),
            ("get", "/admin/stats"),
            ("patch", "/admin/claims/some-id"),
        ],
    )
    def test_admin_routes_reject_regular_users(self, client, user_headers, method, path):
        kwargs = {"json": {"status": "approved"}} if method == "patch" else {}

        response = getattr(client, method)(f"{API}{path}", headers=user_headers, **kwargs)

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Admin access required"

    def test_approve_pending_claim(self, client, user_headers, admin_headers):
        claim_id = self._claim(client, user_headers)

        pending = client.get(f"{API}/admin/claims/pending", headers=admin_headers).json()
        assert [c["id"] for c in pending] == [claim_id]
        assert pending[0]["user"]["username"] == "alice"

        response = client.patch(
            f"{API}/admin/claims/{claim_id}",
            json={"status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["user_reward"]["status"] == "approved"
        assert client.get(f"{API}/admin/claims/pending", headers=admin_headers).json() == []

    def test_reject_does_not_refund(self, client, user_headers, admin_headers):
        claim_id = self._claim(client, user_headers)

        client.patch(
            f"{API}/admin/claims/{claim_id}",
            json={"status": "rejected"},
            headers=admin_headers,
        )

        me = client.get(f"{API}/auth/me", headers=user_headers).json()
        assert me["data"]["points"] == 1950
        logs = client.get(f"{API}/admin/logs", headers=admin_headers).json()
        assert logs[0]["action"] == "UPDATE"
        assert logs[0]["data"]["status"] == "rejected"
        assert logs[0]["user"]["username"] == "boss"

    def test_invalid_status(self, client, user_headers, admin_headers):
        claim_id = self._claim(client, user_headers)

        response = client.patch(
            f"{API}/admin/claims/{claim_id}",
            json={"status": "shipped"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_001"

    def test_unknown_claim(self, client, admin_headers):
        response = client.patch(
            f"{API}/admin/claims/missing",
            json={"status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "User reward not found"

    def test_stats_and_all_claims(self, client, user_headers, admin_headers):
        self._claim(client, user_headers)
        self._claim(client, user_headers, title="1 Day Extra Leave")

        stats = client.get(f"{API}/admin/stats", headers=admin_headers).json()
        all_claims = client.get(f"{API}/admin/claims", headers=admin_headers).json()

        assert stats == {
            "pending_claim_count": 2,
            "total_reward_count": 3,
            "total_claim_count": 2,
        }
        assert [c["reward"]["title"] for c in all_claims] == [
            "1 Day Extra Leave",
            "$50 Amazon Voucher",
        ]

    def test_logs_limit(self, client, user_headers, admin_headers):
        response = client.get(f"{API}/admin/logs?limit=1", headers=admin_headers)
        invalid = client.get(f"{API}/admin/logs?limit=0", headers=admin_headers)

        assert len(response.json()) == 1
        assert invalid.status_code == 422


class TestAuthRoutes:
    def test_login_and_logout(self, client, user_headers, store):
        login = client.post(
            f"{API}/auth/login", json={"username": "alice", "password": "pw-alice"}
        )
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

        assert client.get(f"{API}/auth/me", headers=headers).json()["username"] == "alice"
        assert client.post(f"{API}/auth/logout", headers=headers).status_code == 204

        codes = [log["code"] for log in store.tables["logs"].values()]
        assert codes == ["USER_REG", "USER_LOGIN", "USER_LOGOUT"]

    def test_bad_login(self, client, user_headers):
        response = client.post(
            f"{API}/auth/login", json={"username": "alice", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_admin_signup_with_wrong_code(self, client):
        response = client.post(
            f"{API}/auth/register",
            json={
                "fullname": "Mallory",
                "username": "mallory",
                "email": "mallory@example.com",
                "password": "pw",
                "role": "admin",
                "admin_code": "guess",
            },
        )

        assert response.status_code == 403

    def test_invalid_token(self, client):
        response = client.get(
            f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401


@pytest.fixture
def many_logs(store):
    """조회 상한(500건)을 넘는 활동 로그"""

    async def _seed():
        service = ActivityLogService(store)
        for seq in range(520):
            await service.append(
                ActivityLogCreate(
                    user_id="legacy-user",
                    action="LOGIN",
                    code="USER_LOGIN",
                    data=LogData(seq=seq),
                )
            )

    asyncio.run(_seed())


class TestAdminLogPaging:
    def test_logs_can_be_paged_past_limit_cap(self, many_logs, client, admin_headers):
        seen = []
        while True:
            page = client.get(
                f"{API}/admin/logs?limit=500&offset={len(seen)}", headers=admin_headers
            )
            assert page.status_code == 200
            if not page.json():
                break
            seen.extend(page.json())

        # 시드 520건 + 관리자 가입 로그
        assert len(seen) == 521
        assert len({log["id"] for log in seen}) == 521
        assert seen[0]["code"] == "USER_REG"
        assert [log["data"]["seq"] for log in seen[1:]] == list(range(519, -1, -1))

    def test_negative_offset_is_rejected(self, client, admin_headers):
        response = client.get(f"{API}/admin/logs?offset=-1", headers=admin_headers)

        assert response.status_code == 422
