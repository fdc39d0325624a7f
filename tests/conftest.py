"""测试夹具：为 pytest 提供数据库、客户端与 Cloudinary 替身的共享配置。"""

import os
from typing import Generator

TEST_DB_PATH = os.path.join(os.path.dirname(__file__), "test.db")
TEST_DATABASE_URL = f"sqlite:///{TEST_DB_PATH}"

# 配置在首次 import 应用时即被缓存，必须先写入环境变量
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456789012345")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(os.path.dirname(__file__), "log"))

import cloudinary.uploader  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.main import app  # noqa: E402
from app.packages.onboarding.core.dependencies import get_db  # noqa: E402
from app.packages.onboarding.db import session as db_session  # noqa: E402
from app.packages.onboarding.db.init_db import init_db  # noqa: E402
from app.packages.onboarding.models import Base  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database() -> Generator[None, None, None]:
    """创建隔离的 SQLite 测试数据库，并在会话结束后清理。"""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db_session.engine = engine
    db_session.SessionLocal = TestingSessionLocal

    Base.metadata.create_all(bind=engine)
    init_db()
    yield

    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture()
def db_session_fixture() -> Generator[Session, None, None]:
    """提供给测试用例使用的数据库会话。"""
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session_fixture):
    """构建 FastAPI TestClient，并注入测试专用的数据库依赖。"""
    def override_get_db() -> Generator[Session, None, None]:
        session = db_session.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def admin_token(client: TestClient) -> str:
    response = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()["data"]["access_token"]


@pytest.fixture()
def auth_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


def onboarding_payload(**overrides) -> dict:
    payload = {
        "account_name": "Kopi Corner Sdn Bhd",
        "onboarding_types": ["hardware_delivery", "remote_training"],
        "delivery_address1": "12 Jalan Ampang",
        "delivery_city": "Kuala Lumpur",
        "delivery_state": "Wilayah Persekutuan",
        "delivery_postal_code": "50450",
        "pic_name": "Siti Aminah",
        "pic_phone": "+60123456789",
        "pic_email": "siti@example.com",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def create_onboarding(client: TestClient, auth_headers: dict):
    """返回一个工厂函数，按需创建入驻记录并返回响应中的 ``data``。"""
    def _create(**overrides) -> dict:
        response = client.post("/api/v1/onboarding", json=onboarding_payload(**overrides), headers=auth_headers)
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _create


class FakeCloudinaryUploader:
    """记录上传调用并返回与 Cloudinary 相同结构的结果。"""

    def __init__(self) -> None:
        self.uploads: list[dict] = []
        self.destroyed: list[str] = []
        self.fail_on_call: int | None = None

    def upload(self, file, **options):
        index = len(self.uploads) + 1
        if self.fail_on_call == index:
            raise RuntimeError("cloudinary is down")
        public_id = f"{options['folder']}/asset{index}"
        self.uploads.append({"public_id": public_id, "options": options, "size": len(file)})
        return {
            "public_id": public_id,
            "resource_type": "raw",
            "secure_url": f"https://res.cloudinary.com/{options['cloud_name']}/raw/upload/v1/{public_id}",
            "bytes": len(file),
        }

    def destroy(self, public_id, **options):
        self.destroyed.append(public_id)
        return {"result": "ok"}


@pytest.fixture()
def fake_uploader(monkeypatch) -> FakeCloudinaryUploader:
    fake = FakeCloudinaryUploader()
    monkeypatch.setattr(cloudinary.uploader, "upload", fake.upload)
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake.destroy)
    return fake
