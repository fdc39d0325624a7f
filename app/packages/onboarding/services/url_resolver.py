"""附件地址候选生成：由 public_id 推导出一组按可能性排序的访问地址。

这里只做纯计算，不发起网络请求；探测与落库由 ``reconciliation`` 负责。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from app.packages.onboarding.core.enums import CloudResourceTypeEnum
from app.packages.onboarding.services.cloudinary_storage import (
    CloudinaryCredentials,
    build_delivery_url,
    build_signed_download_url,
    resource_type_for_mime,
)

DEFAULT_RESOURCE_TYPE_ORDER: tuple[str, ...] = (
    CloudResourceTypeEnum.AUTO.value,
    CloudResourceTypeEnum.RAW.value,
    CloudResourceTypeEnum.IMAGE.value,
    CloudResourceTypeEnum.VIDEO.value,
)


@dataclass(frozen=True)
class UrlCandidate:
    url: str
    resource_type: str
    signed: bool = False


def normalize_resource_types(resource_types: Optional[Iterable[str]]) -> tuple[str, ...]:
    """去重并校验资源类型顺序，未知类型直接报错，空值回退到默认顺序。"""
    if resource_types is None:
        return DEFAULT_RESOURCE_TYPE_ORDER
    allowed = {item.value for item in CloudResourceTypeEnum}
    ordered: list[str] = []
    for raw in resource_types:
        value = (raw or "").strip().lower()
        if not value:
            continue
        if value not in allowed:
            raise ValueError(f"Unknown Cloudinary resource type: {raw!r}")
        if value not in ordered:
            ordered.append(value)
    return tuple(ordered) or DEFAULT_RESOURCE_TYPE_ORDER


def iter_candidate_urls(
    public_id: str,
    *,
    credentials: CloudinaryCredentials,
    resource_types: Optional[Iterable[str]] = None,
    include_signed: bool = True,
    mime_type: Optional[str] = None,
    signed_ttl_seconds: int = 3600,
) -> Iterator[UrlCandidate]:
    """按顺序惰性产出候选地址：先各资源类型的未签名地址，最后一个签名地址。

    签名地址在被取到时才带上当前时间戳生成，因此同一个生成器不可重放，
    每次调用得到的签名地址也各不相同。
    """
    for resource_type in normalize_resource_types(resource_types):
        yield UrlCandidate(
            url=build_delivery_url(public_id, resource_type, credentials=credentials),
            resource_type=resource_type,
        )
    if include_signed:
        signed_type = resource_type_for_mime(mime_type)
        yield UrlCandidate(
            url=build_signed_download_url(
                public_id, signed_type, credentials=credentials, ttl_seconds=signed_ttl_seconds
            ),
            resource_type=signed_type,
            signed=True,
        )
