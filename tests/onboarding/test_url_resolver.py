"""候选地址生成：顺序、可配置性与签名地址的惰性生成。"""

from urllib.parse import parse_qs, urlparse

import pytest

from app.packages.onboarding.services.cloudinary_storage import CloudinaryCredentials, resource_type_for_mime
from app.packages.onboarding.services.url_resolver import (
    DEFAULT_RESOURCE_TYPE_ORDER,
    iter_candidate_urls,
    normalize_resource_types,
)

CREDENTIALS = CloudinaryCredentials(cloud_name="demo", api_key="123456789012345", api_secret="shh")
PUBLIC_ID = "product-setup-attachments/abc123"


def test_default_order_ends_with_signed_candidate():
    candidates = list(iter_candidate_urls(PUBLIC_ID, credentials=CREDENTIALS))

    assert [item.resource_type for item in candidates[:4]] == ["auto", "raw", "image", "video"]
    assert [item.signed for item in candidates] == [False, False, False, False, True]
    assert candidates[1].url == "https://res.cloudinary.com/demo/raw/upload/product-setup-attachments/abc123"
    assert candidates[0].url == "https://res.cloudinary.com/demo/auto/upload/product-setup-attachments/abc123"


def test_signed_candidate_carries_signature_and_expiry():
    signed = list(iter_candidate_urls(PUBLIC_ID, credentials=CREDENTIALS, mime_type="application/pdf"))[-1]
    query = parse_qs(urlparse(signed.url).query)

    assert signed.signed is True
    assert signed.resource_type == "raw"
    assert query["public_id"] == [PUBLIC_ID]
    assert query["api_key"] == ["123456789012345"]
    assert "signature" in query
    assert int(query["expires_at"][0]) > int(query["timestamp"][0])


def test_configurable_order_and_signed_toggle():
    candidates = list(
        iter_candidate_urls(
            PUBLIC_ID,
            credentials=CREDENTIALS,
            resource_types=["RAW", "image", "raw"],
            include_signed=False,
        )
    )
    assert [(item.resource_type, item.signed) for item in candidates] == [("raw", False), ("image", False)]


def test_candidates_are_lazy():
    iterator = iter_candidate_urls(PUBLIC_ID, credentials=CREDENTIALS)
    first = next(iterator)
    assert first.resource_type == "auto"
    remaining = list(iterator)
    assert len(remaining) == 4
    assert list(iterator) == []


def test_unknown_resource_type_rejected():
    with pytest.raises(ValueError):
        normalize_resource_types(["raw", "document"])


def test_empty_resource_types_fall_back_to_default():
    assert normalize_resource_types([" ", ""]) == DEFAULT_RESOURCE_TYPE_ORDER
    assert normalize_resource_types(None) == DEFAULT_RESOURCE_TYPE_ORDER


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [
        ("image/png", "image"),
        ("video/mp4", "video"),
        ("application/pdf", "raw"),
        (None, "raw"),
    ],
)
def test_resource_type_for_mime(mime_type, expected):
    assert resource_type_for_mime(mime_type) == expected
