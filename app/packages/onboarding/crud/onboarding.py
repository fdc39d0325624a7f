"""入驻记录 CRUD。"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.packages.onboarding.crud.base import CRUDBase
from app.packages.onboarding.models.onboarding import Onboarding


class CRUDOnboarding(CRUDBase[Onboarding]):
    def query(self, db: Session):
        # 列表与详情都会返回经理与附件信息，预先加载避免 N+1
        return db.query(self.model).options(
            selectinload(self.model.created_by_manager),
            selectinload(self.model.attachments),
        )

    def get_by_token(self, db: Session, token: str) -> Optional[Onboarding]:
        return self.query(db).filter(self.model.access_token == token).first()

    def token_exists(self, db: Session, token: str) -> bool:
        return db.query(self.model.id).filter(self.model.access_token == token).first() is not None

    def list_all(self, db: Session) -> List[Onboarding]:
        return self.query(db).order_by(self.model.created_at.desc()).all()

    def list_by_manager(self, db: Session, manager_id: str) -> List[Onboarding]:
        query = self.query(db).filter(self.model.created_by_manager_id == manager_id)
        return query.order_by(self.model.created_at.desc()).all()


onboarding_crud = CRUDOnboarding(Onboarding)
