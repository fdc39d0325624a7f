"""条款与细则 CRUD。"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from app.packages.onboarding.crud.base import CRUDBase
from app.packages.onboarding.models.terms_conditions import TermsConditions


class CRUDTermsConditions(CRUDBase[TermsConditions]):
    def get_active(self, db: Session) -> Optional[TermsConditions]:
        return self.query(db).filter(self.model.is_active.is_(True)).first()

    def list_all(self, db: Session) -> List[TermsConditions]:
        return self.query(db).order_by(self.model.created_at.desc()).all()

    def deactivate_all(self, db: Session) -> None:
        """将所有激活版本置为未激活，不提交事务，由调用方统一提交。"""
        self.query(db).filter(self.model.is_active.is_(True)).update(
            {self.model.is_active: False}, synchronize_session="fetch"
        )


terms_conditions_crud = CRUDTermsConditions(TermsConditions)
