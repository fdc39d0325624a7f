"""商户产品配置附件模型。

表结构沿用线上已有的 ``product_setup_attachments``，列名为驼峰形式，
修复脚本与下载接口都直接读写这些列。
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.packages.onboarding.core.constants import ATTACHMENT_TABLE_NAME
from app.packages.onboarding.models.base import Base, UUIDPrimaryKeyMixin, utc_now

if TYPE_CHECKING:  # pragma: no cover
    from app.packages.onboarding.models.onboarding import Onboarding


class ProductSetupAttachment(UUIDPrimaryKeyMixin, Base):
    __tablename__ = ATTACHMENT_TABLE_NAME

    original_name: Mapped[str] = mapped_column("originalName", String(255))
    # Cloudinary 内的永久标识，上传后不可变
    cloudinary_public_id: Mapped[str] = mapped_column("cloudinaryPublicId", String(512))
    # 最近一次可用的访问地址，可由修复脚本重新推导
    cloudinary_url: Mapped[str] = mapped_column("cloudinaryUrl", String(1024))
    mime_type: Mapped[str] = mapped_column("mimeType", String(255))
    file_size: Mapped[int] = mapped_column("fileSize", BigInteger, default=0)
    uploaded_at: Mapped[datetime] = mapped_column(
        "uploadedAt", DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    onboarding_id: Mapped[str] = mapped_column(
        "onboardingId", String(36), ForeignKey("onboardings.id"), index=True
    )

    onboarding: Mapped["Onboarding"] = relationship(back_populates="attachments")
