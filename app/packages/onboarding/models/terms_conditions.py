"""条款与细则版本模型。"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.onboarding.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class TermsConditions(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """同一时刻最多只有一个版本处于激活状态。"""

    __tablename__ = "terms_conditions"

    version: Mapped[str] = mapped_column(String(20))
    content: Mapped[str] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    effective_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
