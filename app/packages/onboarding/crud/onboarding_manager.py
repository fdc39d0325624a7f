"""入驻经理 CRUD。"""

from typing import Optional

from sqlalchemy.orm import Session

from app.packages.onboarding.crud.base import CRUDBase
from app.packages.onboarding.models.onboarding_manager import OnboardingManager


class CRUDOnboardingManager(CRUDBase[OnboardingManager]):
    def get_by_email(self, db: Session, email: str) -> Optional[OnboardingManager]:
        normalized = (email or "").strip().lower()
        return self.query(db).filter(self.model.email == normalized).first()


onboarding_manager_crud = CRUDOnboardingManager(OnboardingManager)
