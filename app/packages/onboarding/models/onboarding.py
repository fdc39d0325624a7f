"""入驻记录模型：保存商户入驻所需的地址、联系人、访问令牌与确认信息。"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.packages.onboarding.core.enums import OnboardingStatusEnum
from app.packages.onboarding.models.attachment import ProductSetupAttachment
from app.packages.onboarding.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from app.packages.onboarding.models.onboarding_manager import OnboardingManager

TRAINING_ADDRESS_FIELDS = ("address1", "address2", "city", "state", "postal_code", "country")


class Onboarding(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """一条入驻记录对应一个商户访问令牌。

    说明：
    - ``onboarding_types`` 以逗号分隔字符串存储，通过 ``types`` 属性读写列表；
    - ``access_token`` 全局唯一，过期后由服务层在访问时自动轮换；
    - 附件按上传时间升序挂载在 ``attachments`` 上。
    """

    __tablename__ = "onboardings"

    account_name: Mapped[str] = mapped_column(String(255))
    onboarding_types: Mapped[str] = mapped_column(String(255), default="")

    delivery_address1: Mapped[str] = mapped_column(String(255))
    delivery_address2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    delivery_city: Mapped[str] = mapped_column(String(100))
    delivery_state: Mapped[str] = mapped_column(String(100))
    delivery_postal_code: Mapped[str] = mapped_column(String(20))
    delivery_country: Mapped[str] = mapped_column(String(100), default="Malaysia")

    use_same_address_for_training: Mapped[bool] = mapped_column(Boolean, default=False)
    training_address1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    training_address2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    training_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    training_state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    training_postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    training_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    pic_name: Mapped[str] = mapped_column(String(100))
    pic_phone: Mapped[str] = mapped_column(String(50))
    pic_email: Mapped[str] = mapped_column(String(255))

    expected_go_live_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    access_token: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    token_expiry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(20), default=OnboardingStatusEnum.CREATED.value, index=True)

    product_setup_confirmed: Mapped[bool] = mapped_column(Boolean, default=False)
    product_setup_confirmed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    terms_accepted: Mapped[bool] = mapped_column(Boolean, default=False)
    terms_accepted_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    terms_accepted_version_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    terms_accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by_manager_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("onboarding_managers.id"), index=True
    )

    created_by_manager: Mapped[OnboardingManager] = relationship()
    attachments: Mapped[List[ProductSetupAttachment]] = relationship(
        back_populates="onboarding",
        order_by=ProductSetupAttachment.uploaded_at,
    )

    @property
    def types(self) -> list[str]:
        return [item for item in (self.onboarding_types or "").split(",") if item]

    @types.setter
    def types(self, values: list[str]) -> None:
        self.onboarding_types = ",".join(dict.fromkeys(values))

    def copy_delivery_to_training(self) -> None:
        """勾选“培训地址同配送地址”时，把配送地址逐项复制到培训地址。"""
        for suffix in TRAINING_ADDRESS_FIELDS:
            setattr(self, f"training_{suffix}", getattr(self, f"delivery_{suffix}"))
