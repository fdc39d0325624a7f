"""附件上传与下载接口测试，Cloudinary SDK 的上传调用由替身代替。"""

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from app.packages.onboarding.core.config import get_settings


def _files(*names: str, content: bytes = b"%PDF-1.4 sample"):
    return [("files", (name, content, "application/pdf")) for name in names]


def test_upload_attachments(client: TestClient, auth_headers: dict, create_onboarding, fake_uploader):
    created = create_onboarding()
    token = created["access_token"]

    response = client.post(
        f"/api/v1/merchant-onboarding/upload-attachments/{token}",
        files=_files("menu.pdf", "price-list.pdf"),
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert [item["original_name"] for item in data] == ["menu.pdf", "price-list.pdf"]
    assert all(item["mime_type"] == "application/pdf" for item in data)
    assert data[0]["cloudinary_public_id"].startswith("product-setup-attachments/")

    options = fake_uploader.uploads[0]["options"]
    assert options["folder"] == "product-setup-attachments"
    assert options["resource_type"] == "auto"
    assert options["access_mode"] == "public"
    assert options["unique_filename"] is True

    detail = client.get(f"/api/v1/onboarding/{created['id']}", headers=auth_headers).json()["data"]
    assert detail["product_setup_confirmed"] is True
    assert len(detail["attachments"]) == 2

    listed = client.get(f"/api/v1/onboarding/{created['id']}/attachments", headers=auth_headers)
    assert len(listed.json()["data"]) == 2


def test_upload_rejects_denied_extension(client: TestClient, create_onboarding, fake_uploader):
    token = create_onboarding()["access_token"]
    response = client.post(
        f"/api/v1/merchant-onboarding/upload-attachments/{token}",
        files=_files("setup.exe"),
    )
    assert response.status_code == 400
    assert fake_uploader.uploads == []


def test_upload_rejects_too_many_files(client: TestClient, create_onboarding, fake_uploader):
    token = create_onboarding()["access_token"]
    names = [f"file{i}.pdf" for i in range(get_settings().attachment_max_files + 1)]
    response = client.post(f"/api/v1/merchant-onboarding/upload-attachments/{token}", files=_files(*names))
    assert response.status_code == 400
    assert fake_uploader.uploads == []


def test_upload_rejects_oversized_file(client: TestClient, create_onboarding, fake_uploader, monkeypatch):
    monkeypatch.setattr(get_settings(), "attachment_max_bytes", 8)
    token = create_onboarding()["access_token"]
    response = client.post(
        f"/api/v1/merchant-onboarding/upload-attachments/{token}",
        files=_files("big.pdf", content=b"0123456789"),
    )
    assert response.status_code == 413


def test_upload_failure_rolls_back(client: TestClient, auth_headers: dict, create_onboarding, fake_uploader):
    created = create_onboarding()
    fake_uploader.fail_on_call = 2

    response = client.post(
        f"/api/v1/merchant-onboarding/upload-attachments/{created['access_token']}",
        files=_files("a.pdf", "b.pdf"),
    )
    assert response.status_code == 502
    assert fake_uploader.destroyed == [fake_uploader.uploads[0]["public_id"]]

    detail = client.get(f"/api/v1/onboarding/{created['id']}", headers=auth_headers).json()["data"]
    assert detail["attachments"] == []
    assert detail["product_setup_confirmed"] is False


def test_upload_with_unknown_token(client: TestClient, fake_uploader):
    response = client.post(
        "/api/v1/merchant-onboarding/upload-attachments/UNKNOWNTOKEN0000",
        files=_files("a.pdf"),
    )
    assert response.status_code == 404


def _uploaded_attachment(client: TestClient, create_onboarding) -> dict:
    token = create_onboarding()["access_token"]
    response = client.post(f"/api/v1/merchant-onboarding/upload-attachments/{token}", files=_files("doc.pdf"))
    return response.json()["data"][0]


def test_download_redirects_to_signed_url(client: TestClient, admin_token: str, create_onboarding, fake_uploader):
    attachment = _uploaded_attachment(client, create_onboarding)

    response = client.get(
        f"/api/v1/files/attachment/{attachment['id']}/download",
        params={"token": admin_token},
        follow_redirects=False,
    )
    assert response.status_code == 302
    location = urlparse(response.headers["location"])
    query = parse_qs(location.query)
    assert location.netloc == "api.cloudinary.com"
    assert location.path.endswith("/demo/raw/download")
    assert query["public_id"] == [attachment["cloudinary_public_id"]]
    assert "signature" in query and "expires_at" in query

    # 签名地址只用于跳转，不会写回数据库
    listed = client.get(
        f"/api/v1/files/attachment/{attachment['id']}/view",
        headers={"Authorization": f"Bearer {admin_token}"},
        follow_redirects=False,
    )
    assert listed.status_code == 302
    assert listed.headers["location"] == attachment["cloudinary_url"]


def test_download_requires_auth(client: TestClient, create_onboarding, fake_uploader):
    attachment = _uploaded_attachment(client, create_onboarding)
    response = client.get(f"/api/v1/files/attachment/{attachment['id']}/download", follow_redirects=False)
    assert response.status_code == 401

    response = client.get(
        f"/api/v1/files/attachment/{attachment['id']}/download",
        params={"token": "bogus"},
        follow_redirects=False,
    )
    assert response.status_code == 401


def test_download_missing_attachment(client: TestClient, auth_headers: dict):
    response = client.get("/api/v1/files/attachment/missing/download", headers=auth_headers, follow_redirects=False)
    assert response.status_code == 404
