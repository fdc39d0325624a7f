"""入驻经理账号模型：负责创建入驻记录并下载商户上传的附件。"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.onboarding.core.enums import ManagerRoleEnum
from app.packages.onboarding.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class OnboardingManager(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "onboarding_managers"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    hashed_password: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default=ManagerRoleEnum.MANAGER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
