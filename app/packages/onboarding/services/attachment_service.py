"""附件服务：商户上传产品配置文件，经理通过签名地址下载。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.packages.onboarding.core.config import Settings, get_settings
from app.packages.onboarding.core.constants import (
    DEFAULT_MIME_TYPE,
    DENIED_ATTACHMENT_EXTENSIONS,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_PAYLOAD_TOO_LARGE,
)
from app.packages.onboarding.core.exceptions import AppException
from app.packages.onboarding.core.logger import logger
from app.packages.onboarding.core.responses import create_response
from app.packages.onboarding.core.timezone import utcnow
from app.packages.onboarding.crud.attachment import attachment_crud
from app.packages.onboarding.models.attachment import ProductSetupAttachment
from app.packages.onboarding.services.cloudinary_storage import get_storage
from app.packages.onboarding.services.onboarding_service import onboarding_service, serialize_attachment


@dataclass(frozen=True)
class AttachmentUpload:
    filename: str
    content_type: Optional[str]
    content: bytes


def _validate_uploads(files: Sequence[AttachmentUpload], settings: Settings) -> None:
    if not files:
        raise AppException(msg="请至少选择一个文件", code=HTTP_STATUS_BAD_REQUEST)
    if len(files) > settings.attachment_max_files:
        raise AppException(
            msg=f"单次最多上传 {settings.attachment_max_files} 个文件", code=HTTP_STATUS_BAD_REQUEST
        )
    for item in files:
        name = (item.filename or "").strip()
        if not name:
            raise AppException(msg="文件名不能为空", code=HTTP_STATUS_BAD_REQUEST)
        extension = os.path.splitext(name)[1].lower()
        if extension in DENIED_ATTACHMENT_EXTENSIONS:
            raise AppException(msg=f"不支持上传该类型的文件：{name}", code=HTTP_STATUS_BAD_REQUEST)
        if not item.content:
            raise AppException(msg=f"文件内容为空：{name}", code=HTTP_STATUS_BAD_REQUEST)
        if len(item.content) > settings.attachment_max_bytes:
            raise AppException(msg=f"文件过大：{name}", code=HTTP_STATUS_PAYLOAD_TOO_LARGE)


class AttachmentService:
    def upload(self, db: Session, token: str, files: Sequence[AttachmentUpload]) -> dict:
        """逐个上传到 Cloudinary 并写入附件记录，全部成功后才提交。

        任意文件上传失败时回滚本次请求已写入的记录，并尽力删除已上传到云端的文件。
        """
        settings = get_settings()
        record = onboarding_service.get_active_record_by_token(db, token)
        _validate_uploads(files, settings)
        storage = get_storage(settings)

        uploaded: list[tuple[str, str]] = []
        created: list[ProductSetupAttachment] = []
        try:
            for item in files:
                result = storage.upload(item.content, filename=item.filename)
                uploaded.append((result["public_id"], result.get("resource_type") or "image"))
                attachment = attachment_crud.create(
                    db,
                    {
                        "original_name": item.filename,
                        "cloudinary_public_id": result["public_id"],
                        "cloudinary_url": result.get("secure_url") or result.get("url") or "",
                        "mime_type": item.content_type or DEFAULT_MIME_TYPE,
                        "file_size": int(result.get("bytes") or len(item.content)),
                        "uploaded_at": utcnow(),
                        "onboarding_id": record.id,
                    },
                    auto_commit=False,
                )
                created.append(attachment)
            record.product_setup_confirmed = True
            record.product_setup_confirmed_date = utcnow()
            db.add(record)
            db.commit()
        except Exception:
            db.rollback()
            for public_id, resource_type in uploaded:
                storage.delete(public_id, resource_type=resource_type)
            raise

        for attachment in created:
            db.refresh(attachment)
        logger.info("Onboarding %s uploaded %d attachment(s)", record.id, len(created))
        return create_response("上传附件成功", [serialize_attachment(item) for item in created])

    def _get_or_404(self, db: Session, attachment_id: str) -> ProductSetupAttachment:
        attachment = attachment_crud.get(db, attachment_id)
        if attachment is None:
            raise AppException(msg="附件不存在", code=HTTP_STATUS_NOT_FOUND)
        return attachment

    def download_url(self, db: Session, attachment_id: str) -> str:
        """返回一小时有效的签名下载地址，仅用于本次跳转，不写回数据库。"""
        settings = get_settings()
        attachment = self._get_or_404(db, attachment_id)
        storage = get_storage(settings)
        url = storage.signed_download_url(
            attachment.cloudinary_public_id,
            mime_type=attachment.mime_type,
            ttl_seconds=settings.signed_url_ttl_seconds,
        )
        logger.info("Issued signed download url for attachment %s", attachment.id)
        return url

    def view_url(self, db: Session, attachment_id: str) -> str:
        attachment = self._get_or_404(db, attachment_id)
        if not attachment.cloudinary_url:
            raise AppException(msg="附件地址不可用", code=HTTP_STATUS_NOT_FOUND)
        return attachment.cloudinary_url


attachment_service = AttachmentService()
