"""Cloudinary 存储封装：上传、删除以及公开/签名地址的生成。

所有调用都显式携带凭证，不依赖 ``cloudinary.config()`` 的全局状态，
这样 API 进程与运维脚本可以各自持有一份配置。
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

import cloudinary.uploader
import cloudinary.utils

from app.packages.onboarding.core.config import Settings
from app.packages.onboarding.core.constants import HTTP_STATUS_BAD_GATEWAY
from app.packages.onboarding.core.enums import CloudResourceTypeEnum
from app.packages.onboarding.core.exceptions import AppException, ConfigurationMissing
from app.packages.onboarding.core.logger import logger


@dataclass(frozen=True)
class CloudinaryCredentials:
    cloud_name: str
    api_key: str
    api_secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryCredentials":
        """从配置构造凭证，缺少任意一项时抛出 ``ConfigurationMissing``。"""
        missing = [
            env_name
            for env_name, value in (
                ("CLOUDINARY_CLOUD_NAME", settings.cloudinary_cloud_name),
                ("CLOUDINARY_API_KEY", settings.cloudinary_api_key),
                ("CLOUDINARY_API_SECRET", settings.cloudinary_api_secret),
            )
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigurationMissing(missing)
        return cls(
            cloud_name=settings.cloudinary_cloud_name.strip(),
            api_key=settings.cloudinary_api_key.strip(),
            api_secret=settings.cloudinary_api_secret.strip(),
        )

    def as_options(self) -> dict[str, str]:
        return {"cloud_name": self.cloud_name, "api_key": self.api_key, "api_secret": self.api_secret}


def resource_type_for_mime(mime_type: Optional[str]) -> str:
    """按 MIME 类型推断 Cloudinary 资源类型：图片、视频，其余按 raw 处理。"""
    mime = (mime_type or "").strip().lower()
    if mime.startswith("image/"):
        return CloudResourceTypeEnum.IMAGE.value
    if mime.startswith("video/") or mime.startswith("audio/"):
        return CloudResourceTypeEnum.VIDEO.value
    return CloudResourceTypeEnum.RAW.value


def build_delivery_url(public_id: str, resource_type: str, *, credentials: CloudinaryCredentials) -> str:
    """生成未签名的公开访问地址：``https://res.cloudinary.com/<cloud>/<type>/upload/<public_id>``。"""
    url, _ = cloudinary.utils.cloudinary_url(
        public_id,
        resource_type=resource_type,
        type="upload",
        secure=True,
        sign_url=False,
        force_version=False,
        cloud_name=credentials.cloud_name,
    )
    # 新版 SDK 会追加 ``_a=`` 统计参数，落库的地址只保留路径部分
    return url.split("?", 1)[0]


def build_signed_download_url(
    public_id: str,
    resource_type: str,
    *,
    credentials: CloudinaryCredentials,
    ttl_seconds: int = 3600,
    attachment: bool = False,
    now: Optional[int] = None,
) -> str:
    """生成带时间戳与签名的私有下载地址，到期后失效，只能临时使用，不得落库。"""
    issued_at = int(now if now is not None else time.time())
    return cloudinary.utils.private_download_url(
        public_id,
        "",
        resource_type=resource_type,
        type="upload",
        attachment=attachment,
        expires_at=issued_at + max(int(ttl_seconds), 1),
        **credentials.as_options(),
    )


class CloudinaryStorage:
    """上传与删除附件，失败时统一转换为 502 业务异常。"""

    def __init__(self, credentials: CloudinaryCredentials, *, folder: str) -> None:
        self.credentials = credentials
        self.folder = folder

    def upload(self, content: bytes, *, filename: str) -> dict[str, Any]:
        try:
            result = cloudinary.uploader.upload(
                content,
                folder=self.folder,
                resource_type="auto",
                use_filename=False,
                unique_filename=True,
                type="upload",
                access_mode="public",
                invalidate=True,
                **self.credentials.as_options(),
            )
        except Exception as exc:
            logger.exception("Cloudinary upload failed for %s: %s", filename, exc)
            raise AppException("文件上传失败：云存储服务不可用", HTTP_STATUS_BAD_GATEWAY) from exc
        if not result or not result.get("public_id"):
            logger.error("Cloudinary upload for %s returned no public_id: %s", filename, result)
            raise AppException("文件上传失败：云存储未返回文件标识", HTTP_STATUS_BAD_GATEWAY)
        logger.info(
            "Cloudinary upload ok file=%s public_id=%s resource_type=%s",
            filename,
            result.get("public_id"),
            result.get("resource_type"),
        )
        return result

    def delete(self, public_id: str, *, resource_type: str = "image") -> None:
        """删除云端文件；用于上传中途失败时回收已上传的文件，错误只记录不抛出。"""
        try:
            cloudinary.uploader.destroy(public_id, resource_type=resource_type, **self.credentials.as_options())
        except Exception:
            logger.warning("Failed to remove Cloudinary asset %s", public_id, exc_info=True)

    def signed_download_url(
        self, public_id: str, *, mime_type: Optional[str], ttl_seconds: int, attachment: bool = True
    ) -> str:
        return build_signed_download_url(
            public_id,
            resource_type_for_mime(mime_type),
            credentials=self.credentials,
            ttl_seconds=ttl_seconds,
            attachment=attachment,
        )


def get_storage(settings: Settings) -> CloudinaryStorage:
    """按配置构造存储客户端；凭证缺失时返回 503 风格的业务错误而不是 500。"""
    try:
        credentials = CloudinaryCredentials.from_settings(settings)
    except ConfigurationMissing as exc:
        logger.error("Cloudinary is not configured: %s", exc)
        raise AppException("云存储未配置", HTTP_STATUS_BAD_GATEWAY) from exc
    return CloudinaryStorage(credentials, folder=settings.cloudinary_upload_folder)
