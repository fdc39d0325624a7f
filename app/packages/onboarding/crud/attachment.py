"""产品配置附件 CRUD。"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from app.packages.onboarding.crud.base import CRUDBase
from app.packages.onboarding.models.attachment import ProductSetupAttachment


class CRUDProductSetupAttachment(CRUDBase[ProductSetupAttachment]):
    def list_recent(self, db: Session, *, limit: Optional[int] = None) -> List[ProductSetupAttachment]:
        """按上传时间倒序返回附件，``limit`` 为空时返回全部。"""
        query = self.query(db).order_by(self.model.uploaded_at.desc(), self.model.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_by_onboarding(self, db: Session, onboarding_id: str) -> List[ProductSetupAttachment]:
        query = self.query(db).filter(self.model.onboarding_id == onboarding_id)
        return query.order_by(self.model.uploaded_at.asc()).all()


attachment_crud = CRUDProductSetupAttachment(ProductSetupAttachment)
