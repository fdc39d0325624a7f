"""入驻记录管理与商户访问令牌的集成测试。"""

from datetime import timedelta

from fastapi.testclient import TestClient

from app.packages.onboarding.core.timezone import utcnow
from app.packages.onboarding.crud.onboarding import onboarding_crud


def test_create_onboarding_generates_token(create_onboarding):
    data = create_onboarding()

    assert data["status"] == "created"
    assert len(data["access_token"]) == 16
    assert data["access_token"] == data["access_token"].upper()
    assert data["onboarding_types"] == ["hardware_delivery", "remote_training"]
    assert data["delivery_country"] == "Malaysia"
    assert data["created_by"]["email"] == "admin@example.com"
    assert data["attachments"] == []


def test_create_onboarding_copies_training_address(create_onboarding):
    data = create_onboarding(use_same_address_for_training=True)

    assert data["training_address1"] == "12 Jalan Ampang"
    assert data["training_city"] == "Kuala Lumpur"
    assert data["training_postal_code"] == "50450"


def test_create_onboarding_requires_types(client: TestClient, auth_headers: dict):
    response = client.post(
        "/api/v1/onboarding",
        json={"account_name": "x", "onboarding_types": []},
        headers=auth_headers,
    )
    assert response.status_code == 422
    assert response.json()["msg"] == "请求参数验证失败"


def test_onboarding_routes_require_login(client: TestClient):
    assert client.get("/api/v1/onboarding").status_code == 401
    assert client.get("/api/v1/onboarding/my-records").status_code == 401


def test_list_and_get_onboarding(client: TestClient, auth_headers: dict, create_onboarding):
    created = create_onboarding(account_name="Listed Merchant")

    listed = client.get("/api/v1/onboarding", headers=auth_headers).json()["data"]
    assert created["id"] in [item["id"] for item in listed]

    mine = client.get("/api/v1/onboarding/my-records", headers=auth_headers).json()["data"]
    assert created["id"] in [item["id"] for item in mine]

    detail = client.get(f"/api/v1/onboarding/{created['id']}", headers=auth_headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["account_name"] == "Listed Merchant"


def test_get_missing_onboarding_returns_404(client: TestClient, auth_headers: dict):
    response = client.get("/api/v1/onboarding/does-not-exist", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["msg"] == "入驻记录不存在"


def test_update_and_status(client: TestClient, auth_headers: dict, create_onboarding):
    created = create_onboarding()

    updated = client.patch(
        f"/api/v1/onboarding/{created['id']}",
        json={"account_name": "Renamed", "onboarding_types": ["onsite_training"]},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["account_name"] == "Renamed"
    assert updated.json()["data"]["onboarding_types"] == ["onsite_training"]
    assert updated.json()["data"]["pic_name"] == "Siti Aminah"

    status_response = client.patch(
        f"/api/v1/onboarding/{created['id']}/status",
        json={"status": "completed"},
        headers=auth_headers,
    )
    assert status_response.status_code == 200
    assert status_response.json()["data"]["status"] == "completed"

    invalid = client.patch(
        f"/api/v1/onboarding/{created['id']}/status",
        json={"status": "archived"},
        headers=auth_headers,
    )
    assert invalid.status_code == 422


def test_regenerate_token_invalidates_old_link(client: TestClient, auth_headers: dict, create_onboarding):
    created = create_onboarding()
    old_token = created["access_token"]

    response = client.post(f"/api/v1/onboarding/{created['id']}/regenerate-token", headers=auth_headers)
    assert response.status_code == 200
    new_token = response.json()["data"]["access_token"]
    assert new_token != old_token

    assert client.get(f"/api/v1/merchant-onboarding/access/{old_token}").status_code == 404
    assert client.get(f"/api/v1/merchant-onboarding/access/{new_token}").status_code == 200


def test_merchant_access_and_check_token(client: TestClient, create_onboarding):
    created = create_onboarding()
    token = created["access_token"]

    access = client.get(f"/api/v1/merchant-onboarding/access/{token}")
    assert access.status_code == 200
    assert access.json()["data"]["id"] == created["id"]

    # 令牌大小写不敏感，便于商户手动输入
    assert client.get(f"/api/v1/merchant-onboarding/access/{token.lower()}").status_code == 200

    check = client.get(f"/api/v1/merchant-onboarding/check-token/{token}")
    assert check.json()["data"] == {"expired": False}

    unknown = client.get("/api/v1/merchant-onboarding/check-token/UNKNOWNTOKEN0000")
    assert unknown.json()["data"] == {"expired": True}

    missing = client.get("/api/v1/merchant-onboarding/access/UNKNOWNTOKEN0000")
    assert missing.status_code == 404


def test_expired_token_is_rotated_on_access(client: TestClient, db_session_fixture, create_onboarding):
    created = create_onboarding()
    record = onboarding_crud.get(db_session_fixture, created["id"])
    record.token_expiry_date = utcnow() - timedelta(days=1)
    db_session_fixture.commit()
    expired_token = record.access_token

    check = client.get(f"/api/v1/merchant-onboarding/check-token/{expired_token}")
    assert check.json()["data"] == {"expired": True}

    # 过期令牌不能直接写入
    blocked = client.patch(f"/api/v1/merchant-onboarding/update/{expired_token}", json={"pic_name": "X"})
    assert blocked.status_code == 400

    access = client.get(f"/api/v1/merchant-onboarding/access/{expired_token}")
    assert access.status_code == 200
    rotated = access.json()["data"]["access_token"]
    assert rotated != expired_token

    check_new = client.get(f"/api/v1/merchant-onboarding/check-token/{rotated}")
    assert check_new.json()["data"] == {"expired": False}


def test_merchant_update_limits_fields(client: TestClient, create_onboarding):
    created = create_onboarding()
    token = created["access_token"]

    response = client.patch(
        f"/api/v1/merchant-onboarding/update/{token}",
        json={
            "pic_name": "Ahmad",
            "expected_go_live_date": "2026-12-01",
            "use_same_address_for_training": True,
            "account_name": "Should Be Ignored",
            "status": "completed",
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pic_name"] == "Ahmad"
    assert data["expected_go_live_date"] == "2026-12-01"
    assert data["training_address1"] == data["delivery_address1"]
    assert data["account_name"] == created["account_name"]
    assert data["status"] == "in_progress"
